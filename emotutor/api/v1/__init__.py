# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

Modules:
    tutor: Tutoring response endpoint.
"""

from fastapi import APIRouter

from emotutor.api.v1 import tutor

# Create the main v1 router
router = APIRouter(prefix="/api/v1")

router.include_router(tutor.router)

__all__ = ["router"]
