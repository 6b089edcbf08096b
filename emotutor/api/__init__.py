# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""HTTP API for Emotutor (FastAPI).

Example:
    uvicorn emotutor.api.app:create_app --factory
"""
