"""
FastAPI Application Entry Point

Restaurant Portal - Hybrid Architecture
Serves the page data and the commands used by the employee ingredient
page and the customer sign-up page.

Endpoints:
    - GET /ingredients: Ingredient catalog
    - GET /currentBranch: Current branch with its unavailable ingredients
    - GET /employee/ingredients: Sorted, searchable availability view
    - POST /api/updateLocationIngredients: ADD/REMOVE an unavailable ingredient
    - POST /api/customerRegister: Create a customer account
    - GET /health: System health check
"""

import asyncio
import sys
import logging
from datetime import datetime
from typing import List, Optional
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Depends, Query, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
import uvicorn
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from werkzeug.security import generate_password_hash

# Windows-specific event loop policy
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

from restaurant_portal.core.config import get_settings, setup_logging
from restaurant_portal.database import get_db, init_db, engine, async_session_maker
from restaurant_portal.models import Branch, BranchUnavailableIngredient, Customer, Ingredient
from restaurant_portal.schemas import (
    AvailabilityMethod,
    BranchRecord,
    CustomerRegisterRequest,
    CustomerRegisterResponse,
    ErrorResponse,
    HealthResponse,
    Ingredient as IngredientSchema,
    IngredientRef,
    IngredientView,
    ToggleViewResponse,
    UpdateLocationIngredientsRequest,
    UpdateLocationIngredientsResponse,
)
from restaurant_portal.seed import seed_database
from restaurant_portal.services.accounts import get_account_registrar
from restaurant_portal.services.availability import get_availability_store
from restaurant_portal.services.catalog import get_catalog_source
from restaurant_portal.services.credentials import PASSWORD_REQUIREMENTS, validate_password
from restaurant_portal.services.toggle_engine import derive_view

# Initialize configuration and logging
settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    logger.info("=" * 60)
    logger.info(f"Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Debug: {settings.debug}")
    logger.info("=" * 60)

    await init_db()

    if settings.is_development:
        async with async_session_maker() as session:
            await seed_database(session)

    logger.info(f"Availability Store: {get_availability_store().provider_name}")
    logger.info(f"Account Registrar: {get_account_registrar().provider_name}")
    logger.info(f"Catalog Source: {get_catalog_source().provider_name}")
    logger.info("Application ready")

    yield  # Application runs

    logger.info("Shutting down...")
    await engine.dispose()
    logger.info("Cleanup complete")


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description=(
        "Branch ingredient availability and customer sign-up for the "
        "restaurant portal."
    ),
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def to_ingredient_schema(row: Ingredient) -> IngredientSchema:
    return IngredientSchema(
        ingredient_name=row.ingredient_name,
        description=row.description,
        image_path=row.image_path,
    )


def to_branch_record(branch: Branch) -> BranchRecord:
    return BranchRecord(
        id=branch.id,
        name=branch.name,
        unavailable_ingredients=[
            IngredientRef(ingredient_name=name) for name in branch.unavailable_names
        ],
    )


async def load_catalog(db: AsyncSession) -> list[IngredientSchema]:
    result = await db.execute(select(Ingredient).order_by(Ingredient.id))
    return [to_ingredient_schema(row) for row in result.scalars().all()]


async def load_current_branch(db: AsyncSession) -> Optional[Branch]:
    """The configured current branch, or the first one."""
    if settings.current_branch_id:
        return await db.get(Branch, settings.current_branch_id)
    result = await db.execute(select(Branch).order_by(Branch.created_at, Branch.id).limit(1))
    return result.scalar_one_or_none()


# =============================================================================
# ROOT & HEALTH ENDPOINTS
# =============================================================================

@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """API root with navigation links."""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.env_mode.value,
        "documentation": "/docs",
        "ingredients": "/employee/ingredients",
        "health": "/health",
    }


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="System Health Check",
)
async def health_check(
    db: AsyncSession = Depends(get_db)
) -> HealthResponse:
    """Verify all system components are operational."""

    db_status = "healthy"
    try:
        await db.execute(select(func.now()))
    except Exception as e:
        db_status = f"unhealthy: {str(e)}"
        logger.error(f"Database health check failed: {e}")

    store_status = "healthy" if await get_availability_store().health_check() else "unhealthy"
    registrar_status = "healthy" if await get_account_registrar().health_check() else "unhealthy"
    catalog_status = "healthy" if await get_catalog_source().health_check() else "unhealthy"

    overall = "operational" if all(
        s == "healthy" for s in [db_status, store_status, registrar_status, catalog_status]
    ) else "degraded"

    return HealthResponse(
        status=overall,
        database=db_status,
        availability_store=store_status,
        account_registrar=registrar_status,
        catalog_source=catalog_status,
        timestamp=datetime.now(),
    )


# =============================================================================
# CATALOG ENDPOINTS
# =============================================================================

@app.get(
    "/ingredients",
    response_model=List[IngredientSchema],
    tags=["Catalog"],
)
async def list_ingredients(
    db: AsyncSession = Depends(get_db),
) -> List[IngredientSchema]:
    """The full ingredient catalog."""
    return await load_catalog(db)


@app.get(
    "/currentBranch",
    response_model=List[BranchRecord],
    responses={404: {"model": ErrorResponse}},
    tags=["Catalog"],
)
async def current_branch(
    db: AsyncSession = Depends(get_db),
) -> List[BranchRecord]:
    """The current branch, as a one-element list."""
    branch = await load_current_branch(db)
    if branch is None:
        raise HTTPException(status_code=404, detail="No branch configured")
    return [to_branch_record(branch)]


@app.get(
    "/employee/ingredients",
    response_model=ToggleViewResponse,
    responses={404: {"model": ErrorResponse}},
    tags=["Employee"],
    summary="Ingredient Availability View",
)
async def ingredient_availability_view(
    search: str = Query("", max_length=100),
    db: AsyncSession = Depends(get_db),
) -> ToggleViewResponse:
    """Sorted catalog filtered by ``search``, with availability at the current branch."""
    branch = await load_current_branch(db)
    if branch is None:
        raise HTTPException(status_code=404, detail="No branch configured")

    catalog = await load_catalog(db)
    view = derive_view(catalog, branch.unavailable_names, search)

    return ToggleViewResponse(
        branch_id=branch.id,
        search_query=search,
        ingredients=[
            IngredientView(
                ingredient_name=ingredient.ingredient_name,
                description=ingredient.description,
                image_path=ingredient.image_path,
                available=view.availability_by_name[ingredient.ingredient_name],
            )
            for ingredient in view.visible_ingredients
        ],
        availability_by_name=view.availability_by_name,
    )


# =============================================================================
# COMMAND ENDPOINTS
# =============================================================================

@app.post(
    "/api/updateLocationIngredients",
    response_model=UpdateLocationIngredientsResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    tags=["Employee"],
    summary="Update Branch Ingredient Availability",
)
async def update_location_ingredients(
    body: UpdateLocationIngredientsRequest,
    db: AsyncSession = Depends(get_db),
) -> UpdateLocationIngredientsResponse:
    """
    ADD inserts the ingredient into the branch's unavailable set,
    REMOVE erases it. Both are idempotent.
    """
    branch = await db.get(Branch, body.branch_id)
    if branch is None:
        raise HTTPException(status_code=404, detail=f"Branch {body.branch_id} not found")

    exists = await db.execute(
        select(Ingredient.id).where(Ingredient.ingredient_name == body.ingredient_name)
    )
    if exists.scalar_one_or_none() is None:
        raise HTTPException(
            status_code=404,
            detail=f"Ingredient {body.ingredient_name} not found",
        )

    name = body.ingredient_name
    if body.method is AvailabilityMethod.ADD:
        if name not in branch.unavailable_names:
            branch.unavailable_ingredients.append(BranchUnavailableIngredient(ingredient_name=name))
    else:
        for entry in list(branch.unavailable_ingredients):
            if entry.ingredient_name == name:
                branch.unavailable_ingredients.remove(entry)

    try:
        await db.commit()
    except IntegrityError:
        # A concurrent ADD won the unique constraint
        await db.rollback()
        branch = await db.get(Branch, body.branch_id, populate_existing=True)
        if (name in branch.unavailable_names) != (body.method is AvailabilityMethod.ADD):
            raise HTTPException(status_code=409, detail="Concurrent update conflict")

    logger.info(f"{body.method.value} {name} @ {branch.id}")

    return UpdateLocationIngredientsResponse(
        success=True,
        branch_id=branch.id,
        ingredient_name=name,
        method=body.method,
        unavailable_ingredients=branch.unavailable_names,
    )


@app.post(
    "/api/customerRegister",
    response_model=CustomerRegisterResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    tags=["Customer"],
    summary="Register Customer",
)
async def customer_register(
    body: CustomerRegisterRequest,
    db: AsyncSession = Depends(get_db),
) -> CustomerRegisterResponse:
    """
    Create a customer account.

    400 means the email address is already registered.
    """
    if not validate_password(body.password):
        raise HTTPException(status_code=422, detail=PASSWORD_REQUIREMENTS)

    email = str(body.email_address)
    existing = await db.execute(
        select(Customer.id).where(func.lower(Customer.email_address) == email.lower())
    )
    if existing.scalar_one_or_none() is not None:
        raise HTTPException(status_code=400, detail="Email already exists")

    db.add(Customer(
        username=body.username,
        email_address=email,
        password_hash=generate_password_hash(body.password),
    ))
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=400, detail="Email already exists")

    logger.info(f"Customer registered: {body.username}")

    return CustomerRegisterResponse(
        success=True,
        message=f"Welcome, {body.username}! You have successfully signed up.",
        username=body.username,
    )


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal Server Error",
            "detail": str(exc) if settings.debug else "An unexpected error occurred",
        },
    )


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    uvicorn.run(
        "restaurant_portal.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )
