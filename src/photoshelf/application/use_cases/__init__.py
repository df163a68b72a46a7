from .admit_assets import AdmitAssetsRequest, AdmitAssetsResponse, AdmitAssetsUseCase
from .delete_asset import DeleteAssetRequest, DeleteAssetResponse, DeleteAssetUseCase
from .rotate_asset import RotateAssetRequest, RotateAssetResponse, RotateAssetUseCase

__all__ = [
    "AdmitAssetsRequest", "AdmitAssetsResponse", "AdmitAssetsUseCase",
    "DeleteAssetRequest", "DeleteAssetResponse", "DeleteAssetUseCase",
    "RotateAssetRequest", "RotateAssetResponse", "RotateAssetUseCase",
]
