"""
Model Repository - Thin ORM Adapter

Wraps a SQLModel table class and forwards queries to the ORM through the
booted connection manager. The repository does not extend the model;
it holds a reference to it, so table classes stay plain SQLModel classes.

Creating a repository boots the engine on first use, the same way the
first model instantiation would.
"""

from contextlib import contextmanager
from typing import Any, Callable, Generic, Iterable, Iterator, List, Mapping, Optional, Type, TypeVar

from sqlalchemy import delete, func, insert
from sqlmodel import Session, SQLModel, select

from ..domain.models import Page
from ..services.bootstrap import EngineBootstrap
from ..services.exceptions import PageOutOfRangeError

M = TypeVar("M", bound=SQLModel)

DEFAULT_PER_PAGE = 15


class ModelRepository(Generic[M]):
    def __init__(
        self,
        model: Type[M],
        bootstrap: Optional[EngineBootstrap] = None,
        connection: Optional[str] = None,
    ):
        if bootstrap is None:
            # Imported here to avoid a cycle with the composition root
            from ..app.dependencies import get_engine_bootstrap

            bootstrap = get_engine_bootstrap()

        self.model = model
        self.bootstrap = bootstrap
        self.connection = connection
        self._page_resolver: Callable[[], int] = lambda: 1

        self.bootstrap.ensure_started()

    @contextmanager
    def session(self) -> Iterator[Session]:
        # Boots again if the engine was cleared since this repository was built
        self.bootstrap.ensure_started()
        with self.bootstrap.manager.session(self.connection) as db:
            yield db

    def all(self) -> List[M]:
        with self.session() as db:
            return list(db.exec(self._ordered_select()).all())

    def find(self, primary_key: Any) -> Optional[M]:
        with self.session() as db:
            return db.get(self.model, primary_key)

    def count(self) -> int:
        with self.session() as db:
            statement = select(func.count()).select_from(self.model)
            return db.exec(statement).one()

    def create(self, **attributes: Any) -> M:
        """Builds, persists and returns a new instance. Fires model events."""
        return self.save(self.model(**attributes))

    def save(self, instance: M) -> M:
        with self.session() as db:
            db.add(instance)
            db.commit()
            db.refresh(instance)
            return instance

    def delete(self, instance: M) -> None:
        with self.session() as db:
            db.delete(instance)
            db.commit()

    def insert(self, rows: Iterable[Mapping[str, Any]]) -> None:
        """Bulk insert of raw rows. Bypasses model events."""
        rows = [dict(row) for row in rows]
        if not rows:
            return
        with self.session() as db:
            db.connection().execute(insert(self.model), rows)
            db.commit()

    def truncate(self) -> None:
        """Deletes every row of the table. Bypasses model events."""
        with self.session() as db:
            db.connection().execute(delete(self.model))
            db.commit()

    def on(self, event_name: str, callback: Callable[[M], None]) -> None:
        """Registers a model event listener. Listeners only fire when events are enabled."""
        self.bootstrap.dispatcher.listen(self.model, event_name, callback)

    def for_page(self, page_number: int) -> "ModelRepository[M]":
        """
        Forces the page used by the next paginate() calls.
        Raises PageOutOfRangeError if page_number is below 1.
        """
        if isinstance(page_number, bool) or not isinstance(page_number, int) or page_number < 1:
            raise PageOutOfRangeError(f"Page number must be 1 or greater, got {page_number!r}.")
        self._page_resolver = lambda: page_number
        return self

    def paginate(self, per_page: int = DEFAULT_PER_PAGE, page: Optional[int] = None) -> Page:
        if per_page < 1:
            raise ValueError(f"per_page must be 1 or greater, got {per_page}.")
        current_page = page if page is not None else self._page_resolver()
        if current_page < 1:
            raise PageOutOfRangeError(f"Page number must be 1 or greater, got {current_page}.")

        with self.session() as db:
            total = db.exec(select(func.count()).select_from(self.model)).one()
            statement = (
                self._ordered_select()
                .offset((current_page - 1) * per_page)
                .limit(per_page)
            )
            items = list(db.exec(statement).all())

        return Page(items=items, total=total, per_page=per_page, current_page=current_page)

    def _ordered_select(self):
        primary_key = list(self.model.__table__.primary_key.columns)
        return select(self.model).order_by(*primary_key)
