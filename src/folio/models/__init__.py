"""Shared pydantic base models."""

from folio.models.base import FolioBaseModel, FolioRequestModel

__all__ = ["FolioBaseModel", "FolioRequestModel"]
