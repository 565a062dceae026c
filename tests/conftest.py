"""Shared pytest fixtures"""

import sys
from pathlib import Path

import pytest

# Add project root to path for bm25hybrid imports (no install needed)
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from bm25hybrid.models import Document


@pytest.fixture
def animal_documents():
    """
    Three-document corpus where every term has df=2 of N=3.
    
    Lengths 2, 3, 3 → avgdl = 8/3. Any query over these terms has
    negative idf: ln(1.5 / 2.5) ≈ -0.5108.
    """
    return [
        Document(0, "cat dog"),
        Document(1, "cat cat fish"),
        Document(2, "dog fish fish"),
    ]


@pytest.fixture
def parrot_documents(animal_documents):
    """Animal corpus plus a fourth document with a rare term (df=1 of N=4)"""
    return animal_documents + [Document(3, "parrot")]
