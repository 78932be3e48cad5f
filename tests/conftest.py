from __future__ import annotations

import pytest

from schemes import InformationComponent, InformationScheme
from schemes.config import get_settings


def build_singleton() -> InformationScheme:
    scheme = InformationScheme()
    scheme.add(InformationComponent("The game"))
    return scheme


def build_family() -> InformationScheme:
    """Two parents sharing two children."""
    scheme = InformationScheme()
    mom = InformationComponent("Mutter")
    dad = InformationComponent("Vater")
    bro = InformationComponent("Bruder")
    sis = InformationComponent("Schwester")
    mom.add_child(bro)
    mom.add_child(sis)
    dad.add_child(bro)
    dad.add_child(sis)
    mom.force_family_together()
    dad.force_family_together()
    scheme.add_all([mom, dad, bro, sis])
    return scheme


def build_diamond() -> InformationScheme:
    """Literature splits into two branches that meet again in one leaf."""
    scheme = InformationScheme()
    lit = InformationComponent("Literature")
    aut = InformationComponent("Authors")
    lino = InformationComponent("Light Novels")
    isin = InformationComponent("Nisio Isin")
    dnln = InformationComponent("DN (LN)")
    lit.add_child(aut)
    lit.add_child(lino)
    lit.force_family_together()
    aut.add_child(isin)
    aut.force_family_together()
    dnln.add_parent(isin)
    dnln.add_parent(lino)
    dnln.force_family_together()
    scheme.add_all([lit, aut, lino, isin, dnln])
    return scheme



@pytest.fixture
def singleton() -> InformationScheme:
    return build_singleton()


@pytest.fixture
def family() -> InformationScheme:
    return build_family()


@pytest.fixture
def diamond() -> InformationScheme:
    return build_diamond()


@pytest.fixture(autouse=True)
def fresh_settings():
    """Every test starts from freshly built settings."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
