from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional


class QuantityOption(BaseModel):
    label: str = Field(default="", description="Free text such as '6 pc'")
    value: int
    price: str = Field(default="", description="Fixed 2-decimal price or empty")


class MenuItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    title: str = ""
    short: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    price: Optional[str] = None
    quantities: Optional[List[QuantityOption]] = None
    quantity: Optional[int] = Field(None, description="Legacy single quantity")


class MenuSection(BaseModel):
    model_config = ConfigDict(extra="allow")

    title: str = ""
    id: str = ""
    details: List[str] = Field(default_factory=list)
    items: List[Any] = Field(default_factory=list)


class ContentDocument(BaseModel):
    model_config = ConfigDict(extra="allow")

    business_info: Any = Field(default_factory=dict)
    hero: Any = Field(default_factory=dict)
    about: Any = Field(default_factory=dict)
    hours: Any = Field(default_factory=dict)
    images: Any = Field(default_factory=dict)
    menu: Any = Field(default_factory=list)
    last_updated: str = ""


class SaveContentRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    csrf_token: Optional[str] = None
    section: Optional[str] = None
    content: Any = None
    data: Any = None


class SaveContentResponse(BaseModel):
    success: bool
    message: str
    timestamp: Optional[str] = None


class PreviewDiffRequest(BaseModel):
    menu: List[Any]


class ItemChange(BaseModel):
    title: str
    changes: List[str]


class SectionDiff(BaseModel):
    added: List[str] = Field(default_factory=list)
    removed: List[str] = Field(default_factory=list)
    changed: List[ItemChange] = Field(default_factory=list)


class PreviewDiffResponse(BaseModel):
    success: bool = True
    diff: Dict[str, SectionDiff]


class MigrationResponse(BaseModel):
    success: bool
    changed: bool
    message: str
    timestamp: Optional[str] = None


class InspectionResponse(BaseModel):
    success: bool
    problems: List[str]
    message: str


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    success: bool
    message: str
    csrf_token: Optional[str] = None
