"""
Unit tests for ActivityRepository
"""
from unittest.mock import MagicMock, patch

from app.repositories.activity_repository import ActivityRepository


class TestActivityRepository:

    @patch('app.repositories.activity_repository.get_db_connection_dict')
    def test_find_recent_computes_age_on_database_clock(self, mock_get_conn):
        # Arrange
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_conn.cursor.return_value = mock_cursor
        mock_get_conn.return_value = mock_conn
        mock_cursor.fetchall.return_value = []

        # Act
        rows = ActivityRepository().find_recent(5)

        # Assert
        sql, params = mock_cursor.execute.call_args.args
        assert "NOW() - al.created_at" in sql
        assert "age_seconds" in sql
        assert params == (5,)
        assert rows == []
        mock_conn.close.assert_called_once()

    def test_record_uses_callers_cursor(self):
        cursor = MagicMock()

        ActivityRepository.record(cursor, 3, "Added item", "Milk", 7)

        args = cursor.execute.call_args.args
        assert "INSERT INTO activity_log" in args[0]
        assert args[1] == (3, "Added item", "Milk", 7, None)
