import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import firebase_admin
from firebase_admin import initialize_app, auth
from friendship_api.config import settings
from friendship_api.database import engine
from friendship_api.exceptions import InvalidRequest, Unauthenticated, register_exception_handlers
from friendship_api.utils.id_utils import parse_id

logger = logging.getLogger(__name__)

firebase_app = None

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    global firebase_app
    if settings.environment == "production":
        try:
            from firebase_admin import credentials as fb_credentials

            cred = fb_credentials.ApplicationDefault()
            options = {'projectId': settings.firebase_project_id} if settings.firebase_project_id else None
            firebase_app = initialize_app(credential=cred, options=options)
            logger.info("Firebase initialized successfully")
        except Exception as e:
            logger.exception("Error initializing Firebase")
            raise e
    else:
        logger.info("Running in development mode - skipping Firebase initialization")

    yield

    # Shutdown
    try:
        if firebase_app:
            firebase_admin.delete_app(firebase_app)
            firebase_app = None
    finally:
        # Return pooled connections
        await engine.dispose()

app = FastAPI(lifespan=lifespan)
security = HTTPBearer(auto_error=False)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Dependency to get current user from token
async def get_current_user(credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)) -> dict:

    if settings.environment != "production":
        logger.info("Development mode - skipping token verification")
        return {
            "uid": "dev-user",
            settings.user_id_claim: settings.dev_user_id,
            "name": "Development User",
        }

    if credentials is None:
        raise Unauthenticated("User not authenticated")

    token = credentials.credentials
    logger.info(f"Verifying token: {token[:10]}... (truncated for security)")
    try:
        decoded_token = auth.verify_id_token(token)
        logger.info(f"Successfully decoded token with UID: {decoded_token.get('uid')}")
        return decoded_token
    except Exception as e:
        logger.exception(f"Error verifying Firebase ID token: {str(e)}")
        raise Unauthenticated("User not authenticated", f"Invalid authentication token: {str(e)}")

async def get_caller_id(current_user: dict = Depends(get_current_user)) -> int:
    """
    Resolve the numeric id of the authenticated caller.

    Firebase UIDs are opaque strings, so the numeric ``users.id`` is read from
    the custom claim named by ``settings.user_id_claim``. The user-management
    service sets it with ``auth.set_custom_user_claims`` at sign-up.

    Raises:
        Unauthenticated: If the identity carries no user id
        InvalidRequest: If the user id is not numeric
    """
    raw_id = current_user.get(settings.user_id_claim) if current_user else None
    if raw_id is None or raw_id == "":
        logger.error(f"No {settings.user_id_claim} claim in identity: uid={current_user.get('uid') if current_user else None}")
        raise Unauthenticated("User not authenticated")

    caller_id = parse_id(raw_id)
    if caller_id is None:
        logger.error(f"Invalid userId: {raw_id}")
        raise InvalidRequest("Invalid user ID")
    return caller_id
