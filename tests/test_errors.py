from sqlalchemy.exc import IntegrityError, OperationalError

from faculty_eval.core.errors import classify_db_error, error_body, sqlstate_of


class FakePgError(Exception):
    def __init__(self, sqlstate):
        super().__init__(f"pg error {sqlstate}")
        self.sqlstate = sqlstate


class FakePsycopg2Error(Exception):
    def __init__(self, pgcode):
        super().__init__("pg error")
        self.pgcode = pgcode


def _wrap(orig, cls=IntegrityError):
    return cls("INSERT ...", {}, orig)


def test_sqlstate_mapping():
    assert classify_db_error(_wrap(FakePgError("23505")))[0] == 409
    assert classify_db_error(_wrap(FakePgError("23503")))[0] == 400
    assert classify_db_error(_wrap(FakePgError("23502")))[0] == 400
    assert classify_db_error(_wrap(FakePgError("23514")))[0] == 400
    assert classify_db_error(_wrap(FakePgError("42P01"), OperationalError))[0] == 501
    assert classify_db_error(_wrap(FakePgError("40001"), OperationalError))[0] == 500


def test_psycopg2_pgcode():
    assert sqlstate_of(_wrap(FakePsycopg2Error("23505"))) == "23505"


def test_sqlite_message_fallback():
    exc = _wrap(Exception("UNIQUE constraint failed: users.email"))
    assert sqlstate_of(exc) == "23505"
    assert classify_db_error(exc) == (409, "Resource already exists")

    exc = _wrap(Exception("no such table: students"), OperationalError)
    assert classify_db_error(exc)[0] == 501

    assert sqlstate_of(_wrap(Exception("disk I/O error"), OperationalError)) is None


def test_error_body():
    assert error_body("Nope") == {"status": "error", "message": "Nope"}
    assert error_body("Bad", [{"field": "x"}], hint="y") == {
        "status": "error",
        "message": "Bad",
        "errors": [{"field": "x"}],
        "hint": "y",
    }
