"""User signup: form validation, duplicate check, then account creation and welcome email.

The user document, its credentials account and the signup counter are written
in a single DynamoDB transaction, so a failure leaves none of them behind. The
welcome email goes out after the commit and is not rolled back if it fails.
"""

import json
import logging
import re
from collections.abc import Mapping
from enum import Enum
from typing import Any

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

from golobe.config import Config
from golobe.db.documents import new_id
from golobe.db.dynamo import DynamoDocumentStore
from golobe.db.registry import ID_FIELD, SchemaRegistry
from golobe.db.validator import DocumentValidator, field_errors_from
from golobe.errors import USER_MESSAGES, DuplicateUserError, ErrorCode, PersistenceError, SignupValidationError
from golobe.result import Failure, Result, Success
from golobe.services.analytics import counter_update, ensure_counters
from golobe.services.email import EmailSender, Recipient, render_welcome_email
from golobe.services.passwords import hash_password

logger = logging.getLogger(__name__)

WELCOME_SUBJECT = "Welcome to Golobe"


def _invalid(message: str) -> PydanticCustomError:
    return PydanticCustomError("signup_field", message)


class SignupPhone(BaseModel):
    model_config = ConfigDict(populate_by_name=True, validate_default=True)

    number: str = ""
    dial_code: str = Field(default="", alias="dialCode")

    @field_validator("number")
    @classmethod
    def digits_only(cls, value: str) -> str:
        value = value.strip()
        if not re.fullmatch(r"\d+", value):
            raise _invalid("Invalid phone number. Only numbers are allowed")
        return value

    @field_validator("dial_code")
    @classmethod
    def dial_code_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise _invalid("Dial code is required")
        return value


class SignupForm(BaseModel):
    """Flat signup form as submitted by the browser; ``phone`` arrives JSON-encoded."""

    model_config = ConfigDict(populate_by_name=True, validate_default=True)

    email: str = ""
    password: str = ""
    confirm_password: str = Field(default="", alias="confirmPassword")
    firstname: str = ""
    lastname: str = ""
    accept_terms: str = Field(default="", alias="acceptTerms")
    phone: SignupPhone | None = None

    @field_validator("email", "firstname", "lastname", mode="before")
    @classmethod
    def strip_whitespace(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("email")
    @classmethod
    def valid_email(cls, value: str) -> str:
        if not value:
            raise _invalid("Email is required")
        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError:
            raise _invalid("Invalid email address") from None
        return value

    @field_validator("password")
    @classmethod
    def password_length(cls, value: str) -> str:
        if len(value) < 8:
            raise _invalid("Password must be at least 8 characters")
        return value

    @field_validator("confirm_password")
    @classmethod
    def confirm_password_required(cls, value: str) -> str:
        if not value:
            raise _invalid("Confirm password is required")
        return value

    @field_validator("firstname")
    @classmethod
    def firstname_required(cls, value: str) -> str:
        if not value:
            raise _invalid("First name is required")
        return value

    @field_validator("lastname")
    @classmethod
    def lastname_required(cls, value: str) -> str:
        if not value:
            raise _invalid("Last name is required")
        return value

    @field_validator("accept_terms")
    @classmethod
    def terms_accepted(cls, value: str) -> str:
        if "on" not in value:
            raise _invalid("You must accept the terms and conditions")
        return value

    @field_validator("phone", mode="before")
    @classmethod
    def decode_phone(cls, value: Any) -> Any:
        """Decode the JSON sub-field. Unparseable or all-empty input means no phone."""
        if not isinstance(value, str):
            return value
        try:
            decoded = json.loads(value)
        except ValueError:
            return None
        if isinstance(decoded, dict) and any(decoded.values()):
            return decoded
        return None


def validate_signup_form_data(form_data: Mapping[str, Any]) -> Result[SignupForm]:
    try:
        form = SignupForm.model_validate(dict(form_data))
    except PydanticValidationError as e:
        return Failure(SignupValidationError(field_errors_from(e)))

    if form.password != form.confirm_password:
        return Failure(SignupValidationError({"confirmPassword": "Passwords do not match"}))
    return Success(form)


class SignupStatus(str, Enum):
    SUCCESS = "success"
    VALIDATION_FAILURE = "validation_failure"
    DUPLICATE_FAILURE = "duplicate_failure"
    GENERIC_FAILURE = "generic_failure"


class SignupResult(BaseModel):
    status: SignupStatus
    message: str | None = None
    errors: dict[str, str] = {}
    user_id: str | None = None

    @property
    def success(self) -> bool:
        return self.status is SignupStatus.SUCCESS


def _generic_failure() -> SignupResult:
    return SignupResult(status=SignupStatus.GENERIC_FAILURE, message=USER_MESSAGES[ErrorCode.INTERNAL_ERROR])


class SignupWorkflow:
    def __init__(
        self,
        registry: SchemaRegistry,
        store: DynamoDocumentStore,
        email_sender: EmailSender,
        config: Config,
    ) -> None:
        self._registry = registry
        self._store = store
        self._validator = DocumentValidator(registry)
        self._email_sender = email_sender
        self._config = config

    def sign_up(self, form_data: Mapping[str, Any]) -> SignupResult:
        validation = validate_signup_form_data(form_data)
        if not validation.ok:
            return SignupResult(status=SignupStatus.VALIDATION_FAILURE, errors=validation.error.field_errors)

        form = validation.value
        taken = self._email_taken(form.email)
        if not taken.ok:
            logger.error("Duplicate check failed for %s: %s", form.email, taken.error.message)
            return _generic_failure()
        if taken.value:
            duplicate = DuplicateUserError(form.email)
            logger.info("Signup rejected: %s", duplicate.message)
            return SignupResult(status=SignupStatus.DUPLICATE_FAILURE, errors=duplicate.field_errors)

        try:
            created = self._create_user(form)
            if created.ok:
                self._send_welcome_email(form)
        except Exception:
            logger.exception("Signup failed for %s", form.email)
            return _generic_failure()

        if not created.ok:
            logger.error("Signup failed for %s: %s", form.email, created.error.message)
            return _generic_failure()

        logger.info("User %s signed up", created.value)
        return SignupResult(status=SignupStatus.SUCCESS, message="User created successfully", user_id=created.value)

    def _email_taken(self, email: str) -> Result[bool]:
        lookup = self._registry.lookup("user")
        if not lookup.ok:
            return lookup
        try:
            return Success(self._store.exists(lookup.value, "email", email))
        except Exception as e:
            logger.exception("Email lookup failed")
            error = PersistenceError(f"Failed to check email: {e}")
            error.__cause__ = e
            return Failure(error)

    def _create_user(self, form: SignupForm) -> Result[str]:
        analytics = self._registry.lookup("analytics")
        if not analytics.ok:
            return analytics
        analytics_table = analytics.value.table_name
        ensure_counters(self._store.dynamo_client, analytics_table)

        password_hash = hash_password(form.password, rounds=self._config.bcrypt_rounds)

        user_record: dict[str, Any] = {
            "firstName": form.firstname,
            "lastName": form.lastname,
            "email": form.email,
        }
        if form.phone is not None:
            user_record["phone"] = form.phone.model_dump(by_alias=True)
        user = self._validator.validate("user", user_record)
        if not user.ok:
            return user

        user_id = new_id()
        account = self._validator.validate(
            "account",
            {
                "userId": user_id,
                "provider": "credentials",
                "providerAccountId": user_id,
                "type": "credentials",
                "password": password_hash,
            },
        )
        if not account.ok:
            return account

        (
            self._store.transaction()
            .put(user.value.schema, {ID_FIELD: user_id, **user.value.data})
            .put(account.value.schema, {ID_FIELD: new_id(), **account.value.data})
            .add(counter_update(analytics_table, {"totalUsersSignedUp": 1}))
            .commit()
        )
        return Success(user_id)

    def _send_welcome_email(self, form: SignupForm) -> None:
        html_body = render_welcome_email(form.firstname, self._config.app_name, self._config.app_url)
        self._email_sender.send([Recipient(email=form.email)], WELCOME_SUBJECT, html_body)
