"""
User registration and login.

IdentityService only depends on a database handle, a password hasher and a
token signer, all passed in by the caller; it never reads configuration.
"""

from typing import Any, Dict, Optional

from bson import ObjectId
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from database import USERS, create_document, to_object_id
from errors import DuplicateUserError, InvalidCredentialsError
from log_config import get_logger
from schemas import User
from security import PasswordHasher, TokenSigner, gravatar_url

logger = get_logger("identity")

# Fields safe to hand back to clients.
PUBLIC_USER_FIELDS = {"name": 1, "email": 1, "avatar": 1, "date": 1}


class IdentityService:
    def __init__(self, db: Database, hasher: PasswordHasher, signer: TokenSigner):
        self.db = db
        self.users = db[USERS]
        self.hasher = hasher
        self.signer = signer

    def get_user_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        return self.users.find_one({"email": email})

    def register(self, name: str, email: str, password: str) -> str:
        """Create a user and return an access token for it."""
        if self.get_user_by_email(email):
            raise DuplicateUserError()

        user = User(
            name=name,
            email=email,
            avatar=gravatar_url(email),
            password_hash=self.hasher.hash(password),
        )
        try:
            user_id = create_document(self.db, USERS, user)
        except DuplicateKeyError:
            # Lost a race against a concurrent registration for the same email.
            raise DuplicateUserError() from None

        logger.info("user_registered", user_id=user_id)
        return self.signer.issue(user_id)

    def authenticate(self, email: str, password: str) -> str:
        user = self.get_user_by_email(email)
        if not user or not self.hasher.verify(password, user.get("password_hash", "")):
            logger.info("login_failed")
            raise InvalidCredentialsError()

        user_id = str(user["_id"])
        logger.info("user_logged_in", user_id=user_id)
        return self.signer.issue(user_id)

    def get_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Return the public fields of a user, or None if the id is unknown or malformed."""
        oid = to_object_id(user_id)
        if oid is None:
            return None
        return self.users.find_one({"_id": oid}, PUBLIC_USER_FIELDS)

    def resolve_identity(self, token: str) -> Optional[str]:
        """Map a bearer token to the id of an existing user."""
        user_id = self.signer.subject(token)
        if not user_id:
            return None
        oid = to_object_id(user_id)
        if oid is None or self.users.count_documents({"_id": oid}, limit=1) == 0:
            return None
        return user_id


def serialize_user(doc: Dict[str, Any]) -> Dict[str, Any]:
    data = {key: value for key, value in doc.items() if key != "password_hash"}
    if isinstance(data.get("_id"), ObjectId):
        data["_id"] = str(data["_id"])
    return data
