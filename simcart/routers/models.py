"""
Cart API Pydantic Models

Request bodies for the cart endpoints.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator

from simcart.cart import MAX_QUANTITY_PER_PRODUCT, SelectedOption


class SelectedOptionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    group_name: str = Field(alias="groupName")
    component_id: str = Field(alias="componentId")
    component_name: str = Field(alias="componentName")

    def to_option(self) -> SelectedOption:
        return SelectedOption(
            group_name=self.group_name,
            component_id=self.component_id,
            component_name=self.component_name,
        )


class AddToCartRequest(BaseModel):
    product_id: str = Field(min_length=1)
    quantity: int = Field(1, ge=1, le=MAX_QUANTITY_PER_PRODUCT)
    selected_component_ids: list[str] = []
    selected_options: list[SelectedOptionRequest] = []


class UpdateCartItemRequest(BaseModel):
    quantity: int = Field(ge=1, le=MAX_QUANTITY_PER_PRODUCT)


class MergeCartRequest(BaseModel):
    session_id: str = Field(min_length=1, max_length=100)  # X-Cart-Session used before login

    @field_validator("session_id")
    @classmethod
    def session_id_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("session_id must not be blank")
        return v
