from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class User(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str = ""
    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")

    @field_validator("email", "first_name", "last_name", mode="before")
    @classmethod
    def null_as_empty(cls, value):
        # JSON null reads as an absent value
        return "" if value is None else value

    def to_item(self) -> dict:
        """Attribute map as stored in the users table."""
        return self.model_dump(by_alias=True)


class UserCreate(User):
    email: EmailStr
