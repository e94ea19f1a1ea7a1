from functools import lru_cache
import boto3
from ..core.config import settings


@lru_cache
def get_dynamodb_resource():
    return boto3.resource('dynamodb',
        aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
        aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
        region_name=settings.AWS_REGION,
        endpoint_url=settings.DYNAMODB_ENDPOINT_URL
    )


@lru_cache
def get_users_table():
    return get_dynamodb_resource().Table(settings.USERS_TABLE)
