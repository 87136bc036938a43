"""
Profile lifecycle: fetch, merge-upsert, list, delete and experience entries.

Every mutating method takes the caller's identity (the user id resolved from
the access token) and only ever touches the profile whose ``user`` field
equals it. Writes are single-document atomic operations so concurrent
requests from the same user never produce a second profile.
"""

from typing import Any, Dict, Iterable, List, Optional

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from database import PROFILES, USERS, get_documents, to_object_id, utcnow
from errors import NotFoundError, ValidationError
from log_config import get_logger
from schemas import SOCIAL_FIELDS, Experience

logger = get_logger("profiles")

PROFILE_FIELDS = ("company", "website", "location", "bio", "status", "githubusername", "skills")
REQUIRED_ON_CREATE = ("status", "skills")
OWNER_FIELDS = {"name": 1, "avatar": 1}

OWN_PROFILE_MISSING = "No profile found for this user"
USER_PROFILE_MISSING = "There is no profile for this user"


def parse_skills(skills: str) -> List[str]:
    """Split a comma separated skills string, trimming each entry."""
    return [skill.strip() for skill in skills.split(",")]


def build_profile_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Turn request data into a ``$set`` document.

    Only keys present in ``data`` with a non-null value are included, so
    stored values for fields the client left out are never overwritten.
    Social links are addressed as ``social.<name>`` to update them one by one.
    """
    fields = {}
    for name in PROFILE_FIELDS:
        if data.get(name) is not None:
            fields[name] = data[name]
    if "skills" in fields:
        fields["skills"] = parse_skills(fields["skills"])

    for name in SOCIAL_FIELDS:
        if data.get(name) is not None:
            fields["social." + name] = data[name]
    return fields


def serialize_profile(doc: Dict[str, Any], owner: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    data = dict(doc)
    data["_id"] = str(doc["_id"])
    if owner is not None:
        data["user"] = {"_id": str(owner["_id"]), "name": owner.get("name"), "avatar": owner.get("avatar")}
    else:
        data["user"] = None
    data["experience"] = [dict(entry, _id=str(entry["_id"])) for entry in doc.get("experience", [])]
    return data


class ProfileService:
    def __init__(self, db: Database):
        self.db = db
        self.profiles = db[PROFILES]
        self.users = db[USERS]

    def _populate(self, docs: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Join each profile with its owner's name and avatar."""
        docs = list(docs)
        owner_ids = list({doc["user"] for doc in docs})
        owners = {}
        if owner_ids:
            owners = {user["_id"]: user for user in self.users.find({"_id": {"$in": owner_ids}}, OWNER_FIELDS)}
        return [serialize_profile(doc, owners.get(doc["user"])) for doc in docs]

    def _populate_one(self, doc: Dict[str, Any]) -> Dict[str, Any]:
        return self._populate([doc])[0]

    @staticmethod
    def _owner(identity: str) -> ObjectId:
        owner = to_object_id(identity)
        if owner is None:
            raise NotFoundError(OWN_PROFILE_MISSING)
        return owner

    def get_own(self, identity: str) -> Dict[str, Any]:
        profile = self.profiles.find_one({"user": self._owner(identity)})
        if not profile:
            raise NotFoundError(OWN_PROFILE_MISSING)
        return self._populate_one(profile)

    def _upsert_fields(self, owner: ObjectId, fields: Dict[str, Any]) -> Dict[str, Any]:
        update = {"$set": fields, "$setOnInsert": {"date": utcnow(), "experience": []}}
        try:
            return self.profiles.find_one_and_update(
                {"user": owner}, update, upsert=True, return_document=ReturnDocument.AFTER
            )
        except DuplicateKeyError:
            # Lost the insert to a concurrent request; the retry matches its document.
            return self.profiles.find_one_and_update(
                {"user": owner}, update, upsert=True, return_document=ReturnDocument.AFTER
            )

    def upsert(self, identity: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create the caller's profile or merge ``data`` into the existing one.

        Creating a profile needs both status and skills. When either is
        missing the update only applies to an existing profile, and a
        ValidationError names the missing fields if there is none.
        """
        owner = self._owner(identity)
        fields = build_profile_fields(data)
        missing = [name for name in REQUIRED_ON_CREATE if name not in fields]

        if not missing:
            profile = self._upsert_fields(owner, fields)
        elif fields:
            profile = self.profiles.find_one_and_update(
                {"user": owner},
                {"$set": fields},
                return_document=ReturnDocument.AFTER,
            )
        else:
            profile = self.profiles.find_one({"user": owner})

        if profile is None:
            raise ValidationError.for_fields(*missing)

        logger.info("profile_upserted", user_id=identity, fields=sorted(fields))
        return self._populate_one(profile)

    def list_all(self) -> List[Dict[str, Any]]:
        return self._populate(get_documents(self.db, PROFILES))

    def get_by_user(self, user_id: str) -> Dict[str, Any]:
        owner = to_object_id(user_id)
        if owner is None:
            raise NotFoundError(USER_PROFILE_MISSING)
        profile = self.profiles.find_one({"user": owner})
        if not profile:
            raise NotFoundError(USER_PROFILE_MISSING)
        return self._populate_one(profile)

    def delete_account(self, identity: str) -> None:
        """Remove the caller's profile, then the user. A failure on the profile leaves the user in place."""
        owner = self._owner(identity)
        self.profiles.delete_one({"user": owner})
        self.users.delete_one({"_id": owner})
        logger.info("account_deleted", user_id=identity)

    def add_experience(self, identity: str, experience: Experience) -> Dict[str, Any]:
        entry = experience.model_dump(by_alias=True)
        entry["_id"] = ObjectId()
        profile = self.profiles.find_one_and_update(
            {"user": self._owner(identity)},
            {"$push": {"experience": {"$each": [entry], "$position": 0}}},
            return_document=ReturnDocument.AFTER,
        )
        if profile is None:
            raise NotFoundError(OWN_PROFILE_MISSING)
        logger.info("experience_added", user_id=identity, experience_id=str(entry["_id"]))
        return self._populate_one(profile)

    def remove_experience(self, identity: str, exp_id: str) -> Dict[str, Any]:
        entry_id = to_object_id(exp_id)
        if entry_id is None:
            raise NotFoundError("Experience not found")
        profile = self.profiles.find_one_and_update(
            {"user": self._owner(identity)},
            {"$pull": {"experience": {"_id": entry_id}}},
            return_document=ReturnDocument.AFTER,
        )
        if profile is None:
            raise NotFoundError(OWN_PROFILE_MISSING)
        logger.info("experience_removed", user_id=identity, experience_id=exp_id)
        return self._populate_one(profile)
