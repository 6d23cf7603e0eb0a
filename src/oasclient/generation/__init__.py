from .assets import load_assets
from .client import ClientModule, generate_client, generate_clients, group_plans
from .models import ModelOutput, generate_models
from .profile import GenerationProfile
from .type_emitter import TypeEmitter

__all__ = [
    "ClientModule",
    "GenerationProfile",
    "ModelOutput",
    "TypeEmitter",
    "generate_client",
    "generate_clients",
    "generate_models",
    "group_plans",
    "load_assets",
]
