from dataclasses import dataclass
from typing import Dict, Union


@dataclass(frozen=True)
class PasswordCredentials:
    username: str
    encrypted_password: str
    execution: str

    def to_form(self) -> Dict[str, str]:
        return {
            "username": self.username,
            "password": self.encrypted_password,
            "captcha": "",
            "_eventId": "submit",
            "cllt": "userNameLogin",
            "dllt": "generalLogin",
            "lt": "",
            "execution": self.execution,
        }


@dataclass(frozen=True)
class DynamicCodeCredentials:
    username: str
    dynamic_code: str
    captcha: str
    execution: str

    def to_form(self) -> Dict[str, str]:
        return {
            "username": self.username,
            "captcha": self.captcha,
            "dynamicCode": self.dynamic_code,
            "_eventId": "submit",
            "cllt": "dynamicLogin",
            "dllt": "generalLogin",
            "lt": "",
            "execution": self.execution,
        }


Credentials = Union[PasswordCredentials, DynamicCodeCredentials]
