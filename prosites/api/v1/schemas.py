"""
Request schemas for the billing API
Pydantic 2.x
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic import ValidationError as SchemaValidationError

from prosites.core.exceptions import ValidationError

class SiteCustomerUpdate(BaseModel):
    """Binding to store for a site"""
    customer_id: str = Field(..., min_length=1, description="Stripe customer ID (cus_...)")
    subscription_id: Optional[str] = Field('', description="Stripe subscription ID (sub_...)")

    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "customer_id": "cus_abc",
                "subscription_id": "sub_123"
            }
        }
    )

class SiteCustomerCreate(BaseModel):
    """Email of the paying user and an optional card token"""
    email: EmailStr = Field(..., description="Email of the paying user")
    token: Optional[str] = Field(None, description="Stripe card token (tok_...)")

    model_config = ConfigDict(str_strip_whitespace=True)

def parse_body(schema, data):
    """Validate a JSON body, raising the API's ValidationError on failure"""
    try:
        return schema.model_validate(data or {})
    except SchemaValidationError as e:
        first = e.errors()[0]
        field = '.'.join(str(part) for part in first.get('loc', ())) or None
        raise ValidationError(first.get('msg', 'Invalid request'), field=field) from e

__all__ = ['SiteCustomerUpdate', 'SiteCustomerCreate', 'parse_body']
