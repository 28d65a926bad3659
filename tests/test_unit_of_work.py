import asyncio

import pytest

from conftest import make_profile
from storefront.db.database import engine_options
from storefront.infrastructure.orm import ProfileModel
from storefront.infrastructure.repositories.unit_of_work_impl import UnitOfWorkImpl


async def _rename(db, email, name, fail=False):
    async with UnitOfWorkImpl(db):
        profile = db.query(ProfileModel).filter(ProfileModel.email == email).one()
        profile.display_name = name
        if fail:
            raise RuntimeError("payment provider down")


def test_clean_exit_commits(db):
    make_profile(db, "ada@example.com")

    asyncio.run(_rename(db, "ada@example.com", "Ada Lovelace"))

    db.expire_all()
    assert db.query(ProfileModel).one().display_name == "Ada Lovelace"


def test_error_rolls_back(db):
    make_profile(db, "ada@example.com")

    with pytest.raises(RuntimeError):
        asyncio.run(_rename(db, "ada@example.com", "Changed", fail=True))

    db.expire_all()
    assert db.query(ProfileModel).one().display_name == "ada"


def test_engine_options_by_backend():
    assert engine_options("sqlite:///:memory:")["connect_args"] == {"check_same_thread": False}
    assert "poolclass" not in engine_options("sqlite:///storefront.db")

    postgres = engine_options("postgresql://shop@db/shop")
    assert postgres["pool_pre_ping"] is True
    assert postgres["connect_args"]["application_name"] == "storefront"
