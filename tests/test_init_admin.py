from init_admin import init_admin
from Login_module.Admin.Admin_crud import authenticate_admin


def test_creates_admin_once(db_session):
    assert init_admin(db_session, 'Admin@Example.com', 'secret') is True
    assert init_admin(db_session, 'admin@example.com', 'other') is False

    assert authenticate_admin(db_session, 'admin@example.com', 'secret') is not None
    assert authenticate_admin(db_session, 'admin@example.com', 'other') is None


def test_create_missing_tables_is_idempotent():
    from sqlalchemy import create_engine, inspect
    from create_all_tables import create_missing_tables

    engine = create_engine('sqlite://')

    assert sorted(create_missing_tables(bind=engine)) == ['admins', 'members']
    assert create_missing_tables(bind=engine) == []
    assert {'admins', 'members'} <= set(inspect(engine).get_table_names())
