import pytest

from lionform.models import FieldType, FormFieldConfig


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def email_field():
    return FormFieldConfig(
        id="email",
        field_type=FieldType.EMAIL,
        label="Email",
        is_required=True,
    )


@pytest.fixture
def name_field():
    return FormFieldConfig(id="name", is_required=True)


@pytest.fixture
def signup_doc():
    return {
        "formId": "signup",
        "title": "Sign up",
        "fields": [
            {
                "id": "email",
                "fieldType": "email",
                "label": "Email",
                "isRequired": True,
                "validators": ["email"],
            },
            {
                "id": "password",
                "fieldType": "password",
                "isRequired": True,
                "minLength": 8,
                "validators": ["length"],
            },
            {
                "id": "confirm",
                "fieldType": "password",
                "validators": ["match:password"],
            },
        ],
        "sections": [
            {
                "id": "account",
                "title": "Account",
                "fieldIds": ["email", "password", "confirm"],
            }
        ],
    }
