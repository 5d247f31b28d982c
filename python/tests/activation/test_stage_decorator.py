"""Tests for the stage middleware decorator."""

from unittest.mock import Mock, patch

from staged_controller.activation.decorators import create_stage_decorator


class TestCreateStageDecorator:
    """Test create_stage_decorator."""

    def test_bare_decorator(self):
        """Test @decorator syntax activates with defaults."""
        activate = Mock()
        decorator = create_stage_decorator("request", activate)

        @decorator
        async def check(request, call_next):
            return await call_next(request)

        activate.assert_called_once_with(
            "request", check, how_many=None, verbs=None, override=False
        )

    def test_decorator_with_parameters(self):
        """Test @decorator(...) syntax passes options through."""
        activate = Mock()
        decorator = create_stage_decorator("query", activate)

        @decorator(how_many="instance", verbs="get", override=True)
        async def build_query(request, call_next):
            return await call_next(request)

        activate.assert_called_once_with(
            "query", build_query, how_many="instance", verbs="get", override=True
        )

    def test_returns_function_unchanged(self):
        decorator = create_stage_decorator("documents", Mock())

        async def execute(request, call_next):
            return await call_next(request)

        assert decorator(execute) is execute

    @patch("staged_controller.activation.decorators.logger")
    def test_logs_activation(self, mock_logger):
        decorator = create_stage_decorator("documents", Mock())

        def execute(request, call_next):
            return call_next(request)

        decorator(execute)

        mock_logger.info.assert_called_once()
        assert mock_logger.info.call_args[0][1] == "DOCUMENTS"
