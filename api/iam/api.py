"""
The IAM API module
"""

from django.http import HttpResponse
from ninja_extra import NinjaExtraAPI

from credentials.api import router as credentials_router
from eas.api import router as eas_router

API_VERSION = "v0.0.0"

api = NinjaExtraAPI(
    urls_namespace="iam",
    title="Passport IAM",
    version="0.0.0",
    docs_url="/docs",
    description="""
Issues challenges and stamp credentials, and prepares signed passport
attestations for the on-chain verifier.
""",
)

api.add_router(f"/{API_VERSION}", credentials_router, tags=["Credentials"])
api.add_router(f"/{API_VERSION}", eas_router, tags=["Attestations"])


def health(request):
    return HttpResponse("Ok")
