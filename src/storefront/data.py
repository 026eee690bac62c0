"""Static test data and generators for the storefront suite."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass

from faker import Faker


@dataclass(frozen=True)
class QueryItem:
    query: str
    expected_name: str


@dataclass(frozen=True)
class Payment:
    name_on_card: str
    card_number: str
    cvc: str
    expiry_month: str
    expiry_year: str


@dataclass(frozen=True)
class RuntimeUser:
    email: str
    password: str
    name: str = ""


@dataclass(frozen=True)
class SignupUser:
    name: str
    email: str
    password: str
    first_name: str
    last_name: str
    address1: str
    country: str
    state: str
    city: str
    zipcode: str
    mobile: str

    def runtime_user(self) -> RuntimeUser:
        return RuntimeUser(email=self.email, password=self.password, name=self.name)


@dataclass(frozen=True)
class DateOfBirth:
    day: str
    month: str
    year: str


PATHS = {
    "home": "/",
    "products": "/products",
    "view_cart": "/view_cart",
    "login": "/login",
    "signup": "/signup",
}

HOME_TITLE_TEXT = "Automation Exercise"
HOME_LINKS = (
    "Home",
    "Products",
    "Cart",
    "Signup / Login",
    "Test Cases",
    "API Testing",
    "Video Tutorials",
    "Contact us",
)

SAMPLE_QUERIES = {
    "blue_top": QueryItem(query="Blue Top", expected_name="Blue Top"),
    "men_tshirt": QueryItem(query="Men Tshirt", expected_name="Men Tshirt"),
    "stylish_dress": QueryItem(query="Stylish Dress", expected_name="Stylish Dress"),
}

CATEGORY_WOMEN_DRESS = ("Women", "Dress")
CATEGORY_MEN_TSHIRTS = ("Men", "Tshirts")
BRAND_POLO = "Polo"
BRAND_HM = "H&M"

# Stripe's public test card.
ORDER_PAYMENT = Payment(
    name_on_card="Test User",
    card_number="4242 4242 4242 4242",
    cvc="123",
    expiry_month="12",
    expiry_year="2030",
)

DEFAULT_DATE_OF_BIRTH = DateOfBirth(day="10", month="May", year="1990")

INVALID_LOGIN = {
    "non_existent_email": "no-such-user-e2e@example.com",
    "wrong_password": "WrongPassword!1",
    "invalid_email_format": "not-an-email",
    "valid_password_format": "P@ssw0rd!123",
}


def _unique_token() -> str:
    return f"{int(time.time() * 1000)}{uuid.uuid4().hex[:5]}"


def _slug(seed: str) -> str:
    return "".join(ch if ch.isalnum() else "-" for ch in seed).strip("-") or _unique_token()


def generate_signup_user(seed: str | None = None) -> SignupUser:
    token = _slug(seed) if seed else _unique_token()
    return SignupUser(
        name=f"TestUser_{token}",
        email=f"test_{token}@example.com",
        password="P@ssw0rd!123",
        first_name="Test",
        last_name="User",
        address1="123 Test Street",
        country="Canada",
        state="ON",
        city="Toronto",
        zipcode="M5H 2N2",
        mobile="+1-416-555-1234",
    )


def _faker(seed: str | int | None) -> Faker:
    fake = Faker()
    if seed is not None:
        if isinstance(seed, str):
            try:
                seed = int(seed)
            except ValueError:
                seed = sum(ord(ch) for ch in seed)
        fake.seed_instance(seed)
    return fake


def generate_user(seed: str | int | None = None) -> SignupUser:
    """Random user with realistic address data and a unique email."""
    fake = _faker(seed)
    first_name = fake.first_name()
    last_name = fake.last_name()
    local_part, _, domain = fake.email().lower().partition("@")
    return SignupUser(
        name=f"{first_name} {last_name}",
        email=f"{local_part}+{_unique_token()}@{domain}",
        password=fake.password(length=12, special_chars=True),
        first_name=first_name,
        last_name=last_name,
        address1=fake.street_address(),
        country="Canada",
        state=fake.state_abbr(),
        city=fake.city(),
        zipcode=fake.zipcode(),
        mobile=fake.phone_number(),
    )


def generate_payment(seed: str | int | None = None) -> Payment:
    fake = _faker(seed)
    expiry = fake.future_date(end_date="+5y")
    return Payment(
        name_on_card=fake.name(),
        card_number=fake.credit_card_number(card_type="visa"),
        cvc=fake.credit_card_security_code(card_type="visa"),
        expiry_month=f"{expiry.month:02d}",
        expiry_year=str(expiry.year),
    )
