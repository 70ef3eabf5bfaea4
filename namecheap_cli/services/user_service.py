"""
User Service
Account balances, pricing, funding, passwords and API-created sub-accounts
"""

from typing import List, Optional

from namecheap_cli.api.exceptions import ValidationError
from namecheap_cli.api.models import (
    AccountBalance,
    AddFundsRequest,
    AddFundsStatus,
    LoginCheck,
    PasswordChange,
    PasswordReset,
    PricingEntry,
    UserAccountChange,
    UserProfile,
    project,
)
from namecheap_cli.api.normalizer import as_list
from namecheap_cli.api.result import returns_result
from namecheap_cli.services.base import BaseService, as_dict
from namecheap_cli.utils.logger import get_logger
from namecheap_cli.utils.validators import validate_domain, validate_email

logger = get_logger(__name__)

PRICING_ACTIONS = ("register", "renew", "transfer", "restore", "reactivate")

# reset-password lookup -> FindBy value
FIND_BY = {"email": "EMAILADDRESS", "domain": "DOMAINNAME", "username": "USERNAME"}


class UserService(BaseService):
    """Account-level operations for the authenticated user"""

    def balances(self) -> AccountBalance:
        data = self.client.request("namecheap.users.getBalances")
        return project(AccountBalance, self.section(data, "UserGetBalancesResult"))

    @returns_result
    def get_balances(self) -> AccountBalance:
        return self.balances()

    @returns_result
    def get_pricing(self, action: str = "register", tld: Optional[str] = None, years: int = 1) -> List[PricingEntry]:
        """
        Fetch domain prices for one action.

        The response nests ProductType > ProductCategory > Product > Price;
        it is flattened here into one entry per price, keeping only the
        requested duration.

        Args:
            action: register, renew, transfer, restore or reactivate
            tld: Optional TLD filter, with or without a leading dot
            years: Duration to keep

        Returns:
            List of PricingEntry records
        """
        action = action.lower()
        if action not in PRICING_ACTIONS:
            raise ValidationError(f"Invalid action: {action}", f"Use one of: {', '.join(PRICING_ACTIONS)}")

        params = {
            "ProductType": "DOMAIN",
            "ActionName": action.upper(),
            "ProductName": tld.lstrip(".").lower() if tld else None,
        }
        data = self.client.request("namecheap.users.getPricing", params)
        result = as_dict(data.get("UserGetPricingResult"))

        entries = []
        for product_type in as_list(result.get("ProductType")):
            product_type = as_dict(product_type)
            for category in as_list(product_type.get("ProductCategory")):
                category = as_dict(category)
                for product in as_list(category.get("Product")):
                    product = as_dict(product)
                    for price in as_list(product.get("Price")):
                        entry = project(PricingEntry, dict(
                            as_dict(price),
                            product_type=product_type.get("Name") or "DOMAIN",
                            product_category=category.get("Name") or "",
                            product_name=product.get("Name") or "",
                        ))
                        if entry.duration == years:
                            entries.append(entry)

        logger.info(f"Found {len(entries)} price(s) for {action}")
        return entries

    @returns_result
    def add_funds(self, amount: float, return_url: str) -> AddFundsRequest:
        """
        Start a credit-card funding request.

        Returns:
            AddFundsRequest whose redirect_url must be opened to pay
        """
        if amount <= 0:
            raise ValidationError("Amount must be a positive number")
        if not return_url or not return_url.startswith(("http://", "https://")):
            raise ValidationError("Return URL must be an http(s) URL")

        # The account being funded is the global UserName parameter
        data = self.client.request("namecheap.users.createaddfundsrequest", {
            "PaymentType": "Creditcard",
            "Amount": f"{amount:.2f}",
            "ReturnUrl": return_url,
        })
        return project(AddFundsRequest, self.section(data, "Createaddfundsrequestresult"))

    @returns_result
    def funds_status(self, token_id: str) -> AddFundsStatus:
        if not token_id:
            raise ValidationError("Token ID is required")
        data = self.client.request("namecheap.users.getAddFundsStatus", {"TokenId": token_id})
        return project(AddFundsStatus, dict(self.section(data, "GetAddFundsStatusResult"), token_id=token_id))

    @returns_result
    def change_password(
        self,
        new_password: str,
        old_password: Optional[str] = None,
        reset_code: Optional[str] = None,
    ) -> PasswordChange:
        """Change the account password using either the old password or a reset code"""
        if bool(old_password) == bool(reset_code):
            raise ValidationError("Provide exactly one of the old password or a reset code")
        if not new_password:
            raise ValidationError("New password is required")

        data = self.client.request("namecheap.users.changePassword", {
            "OldPassword": old_password,
            "ResetCode": reset_code,
            "NewPassword": new_password,
        })
        return project(PasswordChange, self.section(data, "UserChangePasswordResult"))

    @returns_result
    def reset_password(
        self,
        find_by: str,
        value: str,
        email_from_name: Optional[str] = None,
        email_from: Optional[str] = None,
        url_pattern: Optional[str] = None,
    ) -> PasswordReset:
        """
        Send a password reset email to an account created through the API.

        Args:
            find_by: email, domain or username
            value: The email address, domain or username to look up
            email_from_name: Sender name shown in the email
            email_from: Sender address shown in the email
            url_pattern: Reset link pattern; Namecheap substitutes the code
        """
        lookup = FIND_BY.get((find_by or "").lower())
        if lookup is None:
            raise ValidationError(f"Invalid find-by value: {find_by}", f"Use one of: {', '.join(FIND_BY)}")
        value = (value or "").strip()
        if not value:
            raise ValidationError(f"A {find_by.lower()} to look up is required")
        if lookup == "EMAILADDRESS":
            value = validate_email(value)
        elif lookup == "DOMAINNAME":
            value = validate_domain(value)

        data = self.client.request("namecheap.users.resetPassword", {
            "FindBy": lookup,
            "FindByValue": value,
            "EmailFromName": email_from_name,
            "EmailFrom": validate_email(email_from) if email_from else None,
            "URLPattern": url_pattern,
        })
        return project(PasswordReset, self.section(data, "UserResetPasswordResult"))

    @returns_result
    def create_user(
        self,
        user_name: str,
        password: str,
        profile: UserProfile,
        accept_terms: bool = False,
        accept_news: bool = False,
        ignore_duplicate_email: bool = False,
    ) -> UserAccountChange:
        """Create a sub-account under the API user"""
        if not accept_terms:
            raise ValidationError(
                "You must accept the terms and conditions",
                "Use --accept-terms to accept the terms and conditions",
            )
        if not user_name or not user_name.strip():
            raise ValidationError("Username for the new account is required")
        if not password:
            raise ValidationError("Password for the new account is required")

        params = dict(
            profile.to_params(),
            EmailAddress=validate_email(profile.email),
            NewUserName=user_name.strip(),
            NewUserPassword=password,
            AcceptTerms=1,
            AcceptNews=1 if accept_news else 0,
            IgnoreDuplicateEmailAddress="yes" if ignore_duplicate_email else None,
        )
        data = self.client.post("namecheap.users.create", params)
        result = project(UserAccountChange, self.section(data, "UserCreateResult"))
        logger.info(f"Created user {user_name.strip()} (ID: {result.user_id})")
        return result

    @returns_result
    def update_user(self, profile: UserProfile) -> UserAccountChange:
        """Replace the account holder details; every required field is sent"""
        params = dict(profile.to_params(), EmailAddress=validate_email(profile.email))
        data = self.client.request("namecheap.users.update", params)
        return project(UserAccountChange, self.section(data, "UserUpdateResult"))

    @returns_result
    def check_login(self, user_name: str, password: str) -> LoginCheck:
        """
        Validate the password of an account created through the API.

        A rejected password is reported as login_success False, not as an error.
        """
        if not user_name or not user_name.strip():
            raise ValidationError("Username is required")
        if not password:
            raise ValidationError("Password is required")

        user_name = user_name.strip()
        # users.login checks the account named by the global UserName parameter
        data = self.client.as_user(user_name).post("namecheap.users.login", {"Password": password})
        result = self.section(data, "UserLoginResult")
        return project(LoginCheck, dict(result, UserName=result.get("UserName") or user_name))
