from pydantic import BaseModel, Field
from typing import Dict, Optional, Union

JSON_HEADERS = {"Content-Type": "application/json"}


class ApiRequest(BaseModel):
    method: str
    path_parameters: Dict[str, str] = Field(default_factory=dict)
    body: Optional[Union[str, bytes]] = None


class ApiResponse(BaseModel):
    status_code: int
    headers: Dict[str, str] = Field(default_factory=lambda: dict(JSON_HEADERS))
    body: str = ""

    def to_envelope(self) -> dict:
        return {
            "statusCode": self.status_code,
            "headers": self.headers,
            "body": self.body
        }
