"""DadeContext test cases."""
import pytest
from unittest.mock import MagicMock

from dade.exceptions.errors import TransactionCompletedError
from dade.repository import ContextState, DadeContext, DadeSet, IUnitOfWorkFactory
from entities import Sample


@pytest.fixture
def mock_factory():
    """Mock factory; create() returns a mock unit of work."""
    return MagicMock(spec=IUnitOfWorkFactory)


class TestLazyInitialization:
    """Test the unit of work is created on first use only."""

    def test_not_created_at_construction(self, mock_factory):
        ctx = DadeContext(mock_factory)
        mock_factory.create.assert_not_called()
        assert ctx.state is ContextState.NOT_STARTED

    @pytest.mark.parametrize("call", [
        lambda ctx: ctx.execute("DELETE FROM Test"),
        lambda ctx: ctx.execute_scalar32("SELECT 1"),
        lambda ctx: ctx.execute_scalar64("SELECT 1"),
        lambda ctx: ctx.commit(),
        lambda ctx: ctx.rollback(),
    ])
    def test_created_on_first_call(self, mock_factory, call):
        ctx = DadeContext(mock_factory)
        call(ctx)
        mock_factory.create.assert_called_once()

    def test_reused_across_calls(self, mock_factory):
        ctx = DadeContext(mock_factory)
        ctx.execute("UPDATE Test SET Name = :name", {"name": "a"})
        ctx.execute_scalar32("SELECT COUNT(*) FROM Test")
        ctx.commit()

        mock_factory.create.assert_called_once()
        uow = mock_factory.create.return_value
        uow.execute.assert_called_once_with("UPDATE Test SET Name = :name", {"name": "a"})
        uow.execute_scalar32.assert_called_once_with("SELECT COUNT(*) FROM Test", None)
        uow.commit.assert_called_once()
        assert ctx.state is ContextState.COMPLETED


class TestCompletion:
    """Test forwarding of commit/rollback failures and reuse after completion."""

    def test_commit_failure_propagates_verbatim(self, mock_factory):
        error = RuntimeError("disk full")
        mock_factory.create.return_value.commit.side_effect = error
        ctx = DadeContext(mock_factory)

        with pytest.raises(RuntimeError) as exc_info:
            ctx.commit()

        assert exc_info.value is error
        assert ctx.state is ContextState.COMPLETED

    def test_rollback_failure_propagates_verbatim(self, mock_factory):
        error = RuntimeError("connection lost")
        mock_factory.create.return_value.rollback.side_effect = error
        ctx = DadeContext(mock_factory)

        with pytest.raises(RuntimeError) as exc_info:
            ctx.rollback()
        assert exc_info.value is error

    def test_calls_after_commit_fail_fast(self, mock_factory):
        ctx = DadeContext(mock_factory)
        ctx.commit()

        with pytest.raises(TransactionCompletedError):
            ctx.execute("SELECT 1")
        with pytest.raises(TransactionCompletedError):
            ctx.rollback()
        mock_factory.create.assert_called_once()

    def test_commit_twice_fails(self, schema):
        ctx = DadeContext(schema)
        ctx.execute("INSERT INTO Test (Name) VALUES ('x')")
        ctx.commit()

        with pytest.raises(TransactionCompletedError):
            ctx.commit()

    def test_close_disposes_unfinished_unit_of_work(self, mock_factory):
        with DadeContext(mock_factory) as ctx:
            ctx.execute("SELECT 1")

        mock_factory.create.return_value.close.assert_called_once()
        assert ctx.state is ContextState.COMPLETED

    def test_close_without_start_creates_nothing(self, mock_factory):
        DadeContext(mock_factory).close()
        mock_factory.create.assert_not_called()


class TestSharedTransaction:
    """Test sets created from a context share its transaction."""

    def test_set_bound_to_context_transaction(self, context):
        samples = context.set(Sample)

        assert isinstance(samples, DadeSet)
        assert samples.transaction is context.transaction

        samples.add(Sample(Name="shared"))
        assert context.execute_scalar32("SELECT COUNT(*) FROM Test WHERE Name = :name", {"name": "shared"}) == 1

    def test_set_uses_unit_of_work_mapper(self, mock_factory):
        ctx = DadeContext(mock_factory)
        samples = ctx.set(Sample)

        assert samples.mapper is mock_factory.create.return_value.mapper
