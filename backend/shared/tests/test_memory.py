"""Tests for the in-memory demo store."""

from shared.auth.models import User
from shared.dal import NewCar
from shared.memory import InMemoryCarRepository, InMemoryStore, InMemoryUserRepository


class TestInMemoryStore:
    async def test_repositories_share_the_store(self):
        store = InMemoryStore()
        users = InMemoryUserRepository(store)
        cars = InMemoryCarRepository(store)

        await users.create_user(User(user_id="u1", username="alice", password_hash="simple$x"))
        await cars.add(NewCar(model="Civic", year=2020, mpg=35), user_id="u1", username="alice")

        assert len(store.users) == 1
        assert len(store.cars) == 1

    async def test_reset_clears_everything(self):
        store = InMemoryStore()
        await InMemoryUserRepository(store).create_user(
            User(user_id="u1", username="alice", password_hash="simple$x"),
        )
        await InMemoryCarRepository(store).add(NewCar(model="Civic", year=2020, mpg=35), user_id="u1", username="a")

        store.reset()

        assert store.users == []
        assert store.cars == []

    def test_separate_stores_are_independent(self):
        first = InMemoryStore()
        second = InMemoryStore()
        first.users.append(User(user_id="u1", username="alice", password_hash="simple$x"))

        assert second.users == []
