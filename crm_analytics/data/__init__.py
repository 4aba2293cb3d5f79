"""
Record models, parsers and snapshot normalization.
"""
from .models import Contact, Contract, DataSnapshot, EmailCampaign, Project
from .normalizer import DataNormalizer

__all__ = ["Contact", "Contract", "DataNormalizer", "DataSnapshot", "EmailCampaign", "Project"]
