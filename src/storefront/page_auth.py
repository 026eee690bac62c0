"""Auth page object: login, signup and account deletion."""

from __future__ import annotations

import re
from typing import Any

from playwright.sync_api import expect

from storefront.assertions import assert_visible
from storefront.common import escape_for_regex, safe_count
from storefront.constants import (
    ACCOUNT_PASSWORD,
    ADDRESS1,
    CITY,
    CONTINUE_BUTTON,
    COUNTRY,
    CREATE_ACCOUNT,
    DAY_SELECT,
    FIRST_NAME,
    HEADER,
    LAST_NAME,
    LOGIN_BUTTON,
    LOGIN_EMAIL,
    LOGIN_PASSWORD,
    MOBILE,
    MONTH_SELECT,
    NEWSLETTER_CHECKBOX,
    OFFERS_CHECKBOX,
    SIGNUP_BUTTON,
    SIGNUP_EMAIL,
    SIGNUP_NAME,
    STATE,
    TITLE_MR_LABEL,
    TITLE_MR_RADIO,
    YEAR_SELECT,
    ZIPCODE,
)
from storefront.data import DEFAULT_DATE_OF_BIRTH, PATHS, SignupUser
from storefront.page_base import BasePage, step
from storefront.polling import poll_until


class AuthPage(BasePage):
    def __init__(self, page: Any, config: Any = None) -> None:
        super().__init__(page, config)
        self.login_header = page.get_by_text("Login to your account", exact=False)
        self.signup_header = page.get_by_text("New User Signup", exact=False)
        self.login_or_signup_header = page.get_by_role(
            "heading", name=re.compile("Login to your account|New User Signup", re.IGNORECASE)
        ).first
        self.header = page.locator(HEADER)

        self.login_email_input = page.locator(LOGIN_EMAIL).or_(page.get_by_label(re.compile("email", re.IGNORECASE)))
        self.login_password_input = page.locator(LOGIN_PASSWORD).or_(
            page.get_by_label(re.compile("password", re.IGNORECASE))
        )
        self.login_button = page.locator(LOGIN_BUTTON).or_(
            page.get_by_role("button", name=re.compile("login", re.IGNORECASE))
        )
        self.logout_link = page.get_by_role("link", name=re.compile("logout", re.IGNORECASE))
        self.login_error_msg = page.get_by_text(re.compile("your email or password is incorrect", re.IGNORECASE))

        self.signup_name_input = page.locator(SIGNUP_NAME)
        self.signup_email_input = page.locator(SIGNUP_EMAIL)
        self.signup_button = page.locator(SIGNUP_BUTTON)
        self.duplicate_email_error = page.get_by_text(re.compile("Email Address already exist", re.IGNORECASE))

        self.enter_info_header = page.get_by_text("Enter Account Information", exact=False)
        self.title_mr_radio = page.locator(TITLE_MR_RADIO)
        self.title_mr_label = page.locator(TITLE_MR_LABEL).first
        self.account_password_input = page.locator(ACCOUNT_PASSWORD)
        self.day_select = page.locator(DAY_SELECT)
        self.month_select = page.locator(MONTH_SELECT)
        self.year_select = page.locator(YEAR_SELECT)
        self.newsletter_checkbox = page.locator(NEWSLETTER_CHECKBOX)
        self.offers_checkbox = page.locator(OFFERS_CHECKBOX)
        self.first_name_input = page.locator(FIRST_NAME)
        self.last_name_input = page.locator(LAST_NAME)
        self.address1_input = page.locator(ADDRESS1)
        self.country_select = page.locator(COUNTRY)
        self.state_input = page.locator(STATE)
        self.city_input = page.locator(CITY)
        self.zipcode_input = page.locator(ZIPCODE)
        self.mobile_input = page.locator(MOBILE)
        self.create_account_button = page.locator(CREATE_ACCOUNT)

        self.account_created_header = page.get_by_text(re.compile("account created", re.IGNORECASE))
        self.account_deleted_header = page.get_by_text(re.compile("account deleted", re.IGNORECASE))
        continue_name = re.compile("continue", re.IGNORECASE)
        self.continue_button = (
            page.locator(CONTINUE_BUTTON)
            .or_(page.get_by_role("link", name=continue_name))
            .or_(page.get_by_role("button", name=continue_name))
        )
        self.delete_account_link = page.get_by_role("link", name=re.compile("delete account", re.IGNORECASE))

    @step("Open the login page")
    def goto_login(self) -> None:
        # Login and signup share one page on this site.
        self.goto(PATHS["login"])
        if not safe_count(self.login_header):
            self.goto(PATHS["signup"])
        assert_visible(self.login_or_signup_header)

    @step("Login with existing user credentials")
    def login_existing_user(self, email: str, password: str) -> None:
        assert_visible(self.login_email_input.first)
        self.login_email_input.first.fill(email)
        self.login_password_input.first.fill(password)
        self.login_button.first.click()

        def _outcome() -> str | None:
            if self.safe_is_visible(self.login_error_msg.first):
                return "error"
            if self.safe_is_visible(self.logout_link.first):
                return "success"
            return None

        result = poll_until(_outcome, timeout_ms=12000, interval_ms=150)
        if result.value == "error" or self.safe_is_visible(self.login_error_msg.first):
            raise RuntimeError("Incorrect email or password")
        assert_visible(self.logout_link.first)

    @step("Open the signup page")
    def goto_signup(self) -> None:
        self.goto(PATHS["signup"])
        assert_visible(self.signup_header.first)

    @step("Create new user account")
    def signup_new_user(self, user: SignupUser, *, auto_continue: bool = True) -> None:
        assert_visible(self.signup_header.first)
        self.signup_name_input.fill(user.name)
        self.signup_email_input.fill(user.email)
        self.signup_button.click()
        self.safe_wait_for_load_state("networkidle")

        if self.safe_is_visible(self.duplicate_email_error.first):
            raise RuntimeError(f"Email address already registered: {user.email}")

        self.safe_click(self.title_mr_label, force=True)
        self.account_password_input.fill(user.password)

        dob = DEFAULT_DATE_OF_BIRTH
        self.day_select.select_option(dob.day)
        self.month_select.select_option(dob.month)
        self.year_select.select_option(dob.year)

        for checkbox in (self.newsletter_checkbox, self.offers_checkbox):
            if safe_count(checkbox):
                try:
                    checkbox.set_checked(True, force=True)
                except Exception:
                    pass

        self.first_name_input.fill(user.first_name)
        self.last_name_input.fill(user.last_name)
        self.address1_input.fill(user.address1)
        self.country_select.select_option(label=user.country)
        self.state_input.fill(user.state)
        self.city_input.fill(user.city)
        self.zipcode_input.fill(user.zipcode)
        self.mobile_input.fill(user.mobile)

        self.create_account_button.click()
        assert_visible(self.account_created_header.first)

        if auto_continue:
            self.continue_after_account_created()

    @step("Assert account created message is visible")
    def assert_account_created_message(self) -> None:
        assert_visible(self.account_created_header.first)

    @step("Continue after account created")
    def continue_after_account_created(self) -> None:
        self.safe_click(self.continue_button.first, timeout_ms=5000)
        self.safe_wait_for_load_state("domcontentloaded")

    @step("Assert logged in as user")
    def assert_logged_in_as(self, name: str) -> None:
        assert_visible(self.header)
        banner = self.header.get_by_text(
            re.compile(rf"Logged in as\s+{escape_for_regex(name)}", re.IGNORECASE)
        )
        logout = self.header.get_by_role("link", name=re.compile("logout", re.IGNORECASE))

        if not self.safe_is_visible(banner.first):
            if safe_count(self.continue_button):
                self.safe_click(self.continue_button.first)
                self.safe_wait_for_load_state("domcontentloaded")
            if not safe_count(self.header):
                self.goto(PATHS["home"])

        if not self.safe_is_visible(banner.first):
            expect(logout.first).to_be_visible(timeout=7000)

    @step("Delete current account")
    def delete_account(self, *, continue_after: bool = True) -> None:
        """Delete the logged-in account; a no-op when no delete link is shown."""
        if not safe_count(self.header) and safe_count(self.continue_button):
            self.safe_click(self.continue_button.first)
            self.safe_wait_for_load_state("domcontentloaded")

        if not safe_count(self.delete_account_link):
            return

        self.delete_account_link.first.click()
        expect(self.account_deleted_header.first).to_be_visible(timeout=10000)

        if continue_after and safe_count(self.continue_button):
            self.safe_click(self.continue_button.first)
            self.safe_wait_for_load_state("domcontentloaded")
