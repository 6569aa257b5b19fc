"""
utils/constants.py

Purpose: Centralized static content

- Page paths and role dashboards
- All user-facing messages
- Onboarding option lists

(Prevents hardcoding across the codebase)
"""

# ============================================================
# PATHS
# ============================================================

LOGIN_PATH = "/login"
SIGNUP_PATH = "/signup"
ONBOARDING_PATH = "/onboarding"

JOB_SEEKER_HOME_PATH = "/dashboard"
JOB_SEEKER_DASHBOARD_PATH = "/job-seeker/dashboard"
EMPLOYER_DASHBOARD_PATH = "/employer/dashboard"
ADMIN_DASHBOARD_PATH = "/admin/dashboard"

# ============================================================
# MESSAGES
# ============================================================

GENERIC_ERROR_MESSAGE = "An error occurred"
LOGIN_FAILED_MESSAGE = "Login failed"
VERIFICATION_FAILED_MESSAGE = "Verification failed"
INVALID_CODE_MESSAGE = "Please enter a valid 6-digit code"
RESEND_FAILED_MESSAGE = "Failed to resend code"
CODE_RESENT_MESSAGE = "Verification code sent! Please check your email."
REGISTRATION_FAILED_MESSAGE = "Registration failed"
PROFILE_FAILED_MESSAGE = "Failed to create profile"
PROFILE_CREATED_MESSAGE = "{role_text} profile created successfully! Redirecting to your dashboard..."
VERIFY_BEFORE_LOGIN_MESSAGE = (
    "Please verify your email address before logging in. "
    "Check your inbox for the verification link."
)

# Substrings that mark a "please verify your email" rejection when the
# backend sends no machine-readable code.
VERIFICATION_MESSAGE_MARKERS = ("verify", "verification")
EMAIL_NOT_VERIFIED_CODE = "EMAIL_NOT_VERIFIED"

# ============================================================
# ONBOARDING OPTIONS
# ============================================================

DEFAULT_COUNTRY_CODE = "+233"

INDUSTRIES = [
    "Technology",
    "Finance",
    "Healthcare",
    "Education",
    "Marketing",
    "Sales",
    "Design",
    "Engineering",
    "Operations",
    "Human Resources",
    "Legal",
    "Customer Service",
    "Manufacturing",
    "Consulting",
    "Media",
    "Government",
    "Non Profit",
    "Agriculture",
    "Construction",
    "Hospitality",
    "Transportation",
    "Retail",
    "Real Estate",
    "Telecommunications",
    "Other",
]

COMPANY_SIZES = [
    "1-10",
    "11-50",
    "51-200",
    "201-500",
    "500+",
]
