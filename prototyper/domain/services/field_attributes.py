"""
Validation attribute names and their default error texts.

The field compiler attaches these attributes to input controls and the
client validation engine runs a rule only when its attribute is present.
"""


class Attr:
    """Validation attribute names."""
    REQUIRED = "data-required-error-text"
    INVALID_DATE = "data-invalid-error-text"
    DATE_OF_BIRTH = "data-date-of-birth-error-text"
    MINIMUM_AGE = "data-date-of-birth-minimum-age"
    MINIMUM_AGE_ERROR = "data-date-of-birth-minimum-age-error-text"
    MAXIMUM_AGE = "data-date-of-birth-maximum-age"
    MAXIMUM_AGE_ERROR = "data-date-of-birth-maximum-age-error-text"
    POSTCODE = "data-proper-postcode-error-text"
    SORT_CODE = "invalid-sort-code"
    ACCOUNT_NUMBER = "invalid-account-number"
    ACCOUNT_NUMBER_LENGTH = "invalid-account-number-length"
    ROLL_NUMBER_LENGTH = "invalid-length-building-society-number"
    ROLL_NUMBER_CHARACTERS = "invalid-characters-building-society-number"
    PASSPORT_NUMBER = "invalid-passport-number"
    EMAIL = "data-email-error-text"
    NATIONAL_INSURANCE_NUMBER = "data-national-insurance-number-error-text"
    PHONE_NUMBER = "data-phone-number-error-text"
    TAX_CODE = "data-tax-code-error-text"
    VAT_REGISTRATION_NUMBER = "data-vat-registration-number-error-text"
    GBP_CURRENCY_AMOUNT = "data-gbp-currency-amount-error-text"
    INVALID_NAME = "invalid-name"


DEFAULT_REQUIRED_ERROR = "Answer this question to continue"
DATE_OF_BIRTH_ERROR = "The date of birth must be in the past"
POSTCODE_ERROR = "Enter a full UK postcode"
SORT_CODE_ERROR = "Enter a valid sort code like 309430"
ACCOUNT_NUMBER_ERROR = "Enter a valid account number like 00733445"
ACCOUNT_NUMBER_LENGTH_ERROR = "Account number must be between 6 and 8 digits"
ROLL_NUMBER_CHARACTERS_ERROR = (
    "Building society roll number must only include letters a to z, numbers, "
    "hyphens, spaces, forward slashes and full stops"
)
ROLL_NUMBER_LENGTH_ERROR = "Building society roll number must be between 1 and 18 characters"
PASSPORT_NUMBER_ERROR = "Enter a valid passport number"
EMAIL_ERROR = "Enter an email address in the correct format, like name@example.com"
NATIONAL_INSURANCE_NUMBER_ERROR = (
    "Enter a National Insurance number that is 2 letters, 6 numbers, "
    "then A, B, C or D, like QQ 12 34 56 C"
)
PHONE_NUMBER_ERROR = "Enter a phone number, like 01632 960 001, 07700 900 982 or +44 808 157 0192"
TAX_CODE_ERROR = "Enter a tax code in the correct format, for example 1117L, K497, S1117L or SK497"
VAT_REGISTRATION_NUMBER_ERROR = (
    "Enter a VAT registration number in the correct format, like GB123456789 or 123456789"
)
GBP_CURRENCY_AMOUNT_ERROR = "Enter a monetary amount in pounds, like 12.34 or 1000"


def invalid_date_error(required: bool) -> str:
    return "Enter a valid date" if required else "Enter a valid date or leave blank"


def _years(value: int) -> str:
    return f"{value} year" if value == 1 else f"{value} years"


def minimum_age_error(minimum_age: int) -> str:
    return f"You must be at least {_years(minimum_age)} old"


def maximum_age_error(maximum_age: int) -> str:
    return f"You must be no more than {_years(maximum_age)} old"
