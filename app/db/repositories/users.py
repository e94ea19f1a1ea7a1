from typing import Dict, List, Optional, Union
import logging
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError
from pydantic_core import PydanticSerializationError
from ...core.errors import UserError, UserErrorKind
from ...schemas.user import User, UserCreate

logger = logging.getLogger(__name__)

CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"
BACKEND_ERRORS = (ClientError, BotoCoreError)


def _is_condition_failure(error: Exception) -> bool:
    return (
        isinstance(error, ClientError)
        and error.response.get("Error", {}).get("Code") == CONDITIONAL_CHECK_FAILED
    )


def _parse_body(body: Optional[Union[str, bytes]]) -> User:
    if not body:
        raise UserError(UserErrorKind.INVALID_INPUT)
    try:
        return User.model_validate_json(body)
    except (ValidationError, UnicodeDecodeError) as e:
        raise UserError(UserErrorKind.INVALID_INPUT, e) from e


def _parse_key(body: Optional[Union[str, bytes]]) -> User:
    user = _parse_body(body)
    if not user.email:
        raise UserError(UserErrorKind.INVALID_INPUT)
    return user


def _encode(user: User) -> Dict:
    try:
        return user.to_item()
    except (PydanticSerializationError, TypeError, ValueError) as e:
        raise UserError(UserErrorKind.ENCODE_FAILED, e) from e


def _decode(item: Dict) -> User:
    try:
        return User.model_validate(item)
    except ValidationError as e:
        raise UserError(UserErrorKind.DECODE_FAILED, e) from e


def update_expression_part(field_name: str) -> str:
    return f"#{field_name} = :{field_name}"


class UserRepository:
    """Users table access, keyed by email.

    Create, update and delete are conditional writes: DynamoDB checks the
    existence of the key atomically with the write, so a failed precondition
    surfaces as ``ConditionalCheckFailedException``.
    """

    def __init__(self, table, page_size: Optional[int] = None):
        self.table = table
        self.page_size = page_size

    async def fetch_user(self, email: str) -> User:
        try:
            response = self.table.get_item(Key={'email': email})
        except BACKEND_ERRORS as e:
            logger.error(f"Error fetching user {email}: {str(e)}")
            raise UserError(UserErrorKind.FETCH_FAILED, e) from e

        item = response.get('Item')
        if item is None:
            raise UserError(UserErrorKind.RECORD_NOT_FOUND)
        return _decode(item)

    async def fetch_users(self) -> List[User]:
        scan_kwargs = {}
        if self.page_size:
            scan_kwargs['Limit'] = self.page_size

        users = []
        while True:
            try:
                response = self.table.scan(**scan_kwargs)
            except BACKEND_ERRORS as e:
                logger.error(f"Error scanning users: {str(e)}")
                raise UserError(UserErrorKind.FETCH_FAILED, e) from e

            users.extend(_decode(item) for item in response.get('Items', []))

            last_key = response.get('LastEvaluatedKey')
            if not last_key:
                break
            scan_kwargs['ExclusiveStartKey'] = last_key

        return users

    async def create_user(self, body: Optional[Union[str, bytes]]) -> User:
        user = _parse_body(body)
        try:
            # Validation only; the key is stored exactly as supplied
            UserCreate.model_validate(user.to_item())
        except ValidationError as e:
            raise UserError(UserErrorKind.INVALID_EMAIL, e) from e

        item = _encode(user)
        try:
            self.table.put_item(
                Item=item,
                ConditionExpression='attribute_not_exists(email)'
            )
        except BACKEND_ERRORS as e:
            if _is_condition_failure(e):
                logger.info(f"User {user.email} already exists")
                raise UserError(UserErrorKind.ALREADY_EXISTS, e) from e
            logger.error(f"Error creating user {user.email}: {str(e)}")
            raise UserError(UserErrorKind.WRITE_FAILED, e) from e

        return User.model_validate(item)

    async def update_user(self, body: Optional[Union[str, bytes]]) -> User:
        user = _parse_key(body)
        item = _encode(user)

        updates = {
            name: value for name, value in item.items()
            if name != 'email' and value
        }
        if not updates:
            # Nothing to write; report the record as it stands
            try:
                return await self.fetch_user(user.email)
            except UserError as e:
                if e.kind is UserErrorKind.RECORD_NOT_FOUND:
                    raise UserError(UserErrorKind.NOT_FOUND) from e
                raise

        try:
            response = self.table.update_item(
                Key={'email': user.email},
                UpdateExpression='SET ' + ', '.join(update_expression_part(name) for name in updates),
                ConditionExpression='attribute_exists(email)',
                ExpressionAttributeNames={f'#{name}': name for name in updates},
                ExpressionAttributeValues={f':{name}': value for name, value in updates.items()},
                ReturnValues='ALL_NEW'
            )
        except BACKEND_ERRORS as e:
            if _is_condition_failure(e):
                logger.info(f"User {user.email} does not exist, nothing updated")
                raise UserError(UserErrorKind.NOT_FOUND, e) from e
            logger.error(f"Error updating user {user.email}: {str(e)}")
            raise UserError(UserErrorKind.WRITE_FAILED, e) from e

        attributes = response.get('Attributes')
        if not attributes:
            raise UserError(UserErrorKind.DECODE_FAILED)
        return _decode(attributes)

    async def delete_user(self, body: Optional[Union[str, bytes]]) -> None:
        user = _parse_key(body)
        try:
            self.table.delete_item(
                Key={'email': user.email},
                ConditionExpression='attribute_exists(email)'
            )
        except BACKEND_ERRORS as e:
            if _is_condition_failure(e):
                logger.info(f"User {user.email} does not exist, nothing deleted")
                raise UserError(UserErrorKind.NOT_FOUND, e) from e
            logger.error(f"Error deleting user {user.email}: {str(e)}")
            raise UserError(UserErrorKind.DELETE_FAILED, e) from e
