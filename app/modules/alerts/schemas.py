from pydantic import BaseModel
from enum import Enum


class AlertKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class Alert(BaseModel):
    kind: AlertKind
    title: str
    message: str
