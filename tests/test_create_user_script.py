"""Tests for the create_user CLI (python -m app.scripts.create_user)."""

import io
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest.mock import patch

from sqlalchemy import create_engine

from app.core.config import Settings
from app.models import Base, User
from app.scripts import create_user


class TestCreateUserScript(unittest.TestCase):
    """The CLI goes through register_user against a file-backed SQLite database."""

    def setUp(self) -> None:
        fd, self.db_path = tempfile.mkstemp(suffix=".db")
        os.close(fd)
        url = f"sqlite:///{self.db_path}"
        engine = create_engine(url)
        Base.metadata.create_all(engine)
        engine.dispose()
        settings = Settings(_env_file=None, DATABASE_URL=url, BCRYPT_ROUNDS=4)
        self.patcher = patch.object(create_user, "get_settings", return_value=settings)
        self.patcher.start()
        self.url = url

    def tearDown(self) -> None:
        self.patcher.stop()
        os.remove(self.db_path)

    def _count(self, email: str) -> int:
        engine = create_engine(self.url)
        try:
            with engine.connect() as conn:
                rows = conn.execute(
                    User.__table__.select().where(User.__table__.c.email == email)
                ).fetchall()
                return len(rows)
        finally:
            engine.dispose()

    def test_creates_user(self) -> None:
        out = io.StringIO()
        with redirect_stdout(out):
            code = create_user.main(["admin@example.com", "pw-123456"])
        self.assertEqual(code, 0)
        self.assertIn("admin@example.com", out.getvalue())
        self.assertEqual(self._count("admin@example.com"), 1)

    def test_duplicate_email_fails(self) -> None:
        with redirect_stdout(io.StringIO()):
            create_user.main(["admin@example.com", "pw-123456"])
        err = io.StringIO()
        with redirect_stderr(err):
            code = create_user.main(["admin@example.com", "other"])
        self.assertEqual(code, 1)
        self.assertIn("User already existed", err.getvalue())
        self.assertEqual(self._count("admin@example.com"), 1)


if __name__ == "__main__":
    unittest.main()
