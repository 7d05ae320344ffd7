"""HTTP API for Patient Directory.

This module contains the FastAPI application, its routes, response models
and the service that connects the record source to the query pipeline.
"""
