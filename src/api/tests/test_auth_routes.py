"""Tests for account routes through the full app (SQLite-backed store)."""

import tempfile
import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient
from sqlalchemy import create_engine, select
from sqlalchemy.pool import QueuePool

from adapter.jwt.token_issuer import JoseTokenIssuer
from adapter.sql import users_table
from adapter.sql.connection import ensure_schema
from adapter.sql.user_repository import SqlUserRepository
from api.main import app
from domain.model.errors import RepositoryError
from utils.config import Settings, get_settings


class TestAuthRoutes(unittest.TestCase):
    """POST /api/register, POST /api/login, GET /api/me."""

    def setUp(self):
        self.client = TestClient(app)
        self.client.__enter__()  # runs lifespan: fresh in-memory database

    def tearDown(self):
        app.dependency_overrides.clear()
        self.client.__exit__(None, None, None)

    def _register(self, name='Alice', email='alice@example.com', password='secret1'):
        return self.client.post('/api/register', json={'name': name, 'email': email, 'password': password})

    def _login(self, email='alice@example.com', password='secret1'):
        return self.client.post('/api/login', json={'email': email, 'password': password})

    def _rows(self):
        with app.state.engine.connect() as conn:
            return conn.execute(select(users_table)).all()

    def test_register_blank_name_then_login(self):
        """Blank name is stored as 'User', email normalized, login round-trips."""
        response = self._register(name='  ', email='Test@Example.com', password='secret1')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {'success': True, 'message': 'Account created!'})

        rows = self._rows()
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0].name, 'User')
        self.assertEqual(rows[0].email, 'test@example.com')
        self.assertNotEqual(rows[0].password, 'secret1')

        response = self._login(email='test@example.com', password='secret1')
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()['success'])
        self.assertTrue(response.json()['token'])

        response = self._login(email='test@example.com', password='wrong')
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {'message': 'Invalid email or password'})

    def test_register_response_has_no_token_or_hash(self):
        body = self._register().json()
        self.assertNotIn('token', body)
        self.assertNotIn('password', str(body))

    def test_register_missing_fields(self):
        for payload in [{}, {'email': 'a@b.com', 'password': 'pw'}, {'name': 'A', 'password': 'pw'},
                        {'name': 'A', 'email': '  ', 'password': 'pw'}]:
            with self.subTest(payload=payload):
                response = self.client.post('/api/register', json=payload)
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json(), {'message': 'All fields required'})
        self.assertEqual(self._rows(), [])

    def test_register_duplicate_email(self):
        self.assertEqual(self._register(email='a@b.com').status_code, 200)

        response = self._register(email=' A@B.COM ')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {'message': 'Email already exists'})
        self.assertEqual(len(self._rows()), 1)

    def test_register_storage_fault_is_server_error(self):
        with patch.object(SqlUserRepository, 'create', side_effect=RepositoryError('disk full')):
            response = self._register()

        self.assertEqual(response.status_code, 500)
        self.assertNotEqual(response.json()['message'], 'Email already exists')

    def test_login_case_insensitive_email(self):
        self._register(email='A@B.com ')
        response = self._login(email='a@b.com')
        self.assertEqual(response.status_code, 200)

    def test_wrong_password_matches_unknown_email(self):
        self._register()

        wrong_password = self._login(password='nope')
        unknown_email = self._login(email='ghost@example.com')

        self.assertEqual(wrong_password.status_code, 401)
        self.assertEqual(wrong_password.status_code, unknown_email.status_code)
        self.assertEqual(wrong_password.json(), unknown_email.json())

    def test_login_missing_fields(self):
        response = self.client.post('/api/login', json={'email': 'a@b.com'})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {'message': 'Email and password required'})

    def test_malformed_requests_get_field_error_body(self):
        """No body, invalid JSON and non-string fields answer like missing fields."""
        cases = [
            ('/api/register', {}, 'All fields required'),
            ('/api/register', {'json': {'name': 'A', 'email': 123, 'password': 'pw'}}, 'All fields required'),
            ('/api/register', {'content': b'not json', 'headers': {'Content-Type': 'application/json'}},
             'All fields required'),
            ('/api/login', {}, 'Email and password required'),
            ('/api/login', {'json': {'email': 123, 'password': 'x'}}, 'Email and password required'),
            ('/api/login', {'json': ['a@b.com', 'x']}, 'Email and password required'),
        ]
        for path, kwargs, message in cases:
            with self.subTest(path=path, kwargs=kwargs):
                response = self.client.post(path, **kwargs)
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json(), {'message': message})
        self.assertEqual(self._rows(), [])

    def test_login_store_failure_is_generic_500(self):
        self._register()
        with patch.object(SqlUserRepository, 'get_by_email', side_effect=RuntimeError('db exploded')):
            response = self._login()

        self.assertEqual(response.status_code, 500)
        self.assertNotIn('exploded', response.json()['message'])

    def test_token_claims_match_row(self):
        self._register(name=' Alice ')
        token = self._login().json()['token']
        row = self._rows()[0]

        claims = JoseTokenIssuer(get_settings().jwt_secret_key).verify(token)
        self.assertEqual(claims['id'], row.id)
        self.assertEqual(claims['name'], 'Alice')
        self.assertEqual(claims['email'], row.email)

    def test_me_with_token(self):
        self._register()
        token = self._login().json()['token']

        response = self.client.get('/api/me', headers={'Authorization': f'Bearer {token}'})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['user']['email'], 'alice@example.com')
        self.assertEqual(response.json()['user']['name'], 'Alice')

    def test_me_without_token(self):
        response = self.client.get('/api/me')
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {'message': 'Not authenticated'})

    def test_me_with_invalid_token(self):
        response = self.client.get('/api/me', headers={'Authorization': 'Bearer garbage'})
        self.assertEqual(response.status_code, 401)


class TestLifecycle(unittest.TestCase):
    """Startup, readiness and connection pool behaviour."""

    def test_api_rejected_before_startup(self):
        client = TestClient(app)  # no context manager: lifespan never runs
        app.state.ready = False

        response = client.post('/api/login', json={'email': 'a@b.com', 'password': 'pw'})

        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json(), {'message': 'Service not ready'})

    def test_landing_page_served(self):
        with TestClient(app) as client:
            response = client.get('/')
        self.assertEqual(response.status_code, 200)
        self.assertIn('MediLocker', response.text)

    def test_health_reports_database(self):
        with TestClient(app) as client:
            response = client.get('/health')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['services']['database']['status'], 'healthy')

    def test_startup_aborts_when_database_unreachable(self):
        settings = Settings(jwt_secret_key='s', database_url='sqlite:////nonexistent-dir/medilocker.db')
        app.state.ready = False

        with patch('api.main.get_settings', return_value=settings):
            with self.assertRaises(RepositoryError):
                with TestClient(app):
                    pass

        self.assertFalse(app.state.ready)

    def test_pool_timeout_is_server_error(self):
        with tempfile.TemporaryDirectory() as tmp, TestClient(app) as client:
            engine = create_engine(
                f'sqlite:///{tmp}/pool.db',
                connect_args={'check_same_thread': False},
                poolclass=QueuePool,
                pool_size=1,
                max_overflow=0,
                pool_timeout=0.1,
            )
            ensure_schema(engine)
            app.state.engine = engine

            held = engine.connect()
            try:
                login = client.post('/api/login', json={'email': 'a@b.com', 'password': 'secret1'})
                register = client.post('/api/register', json={'name': 'A', 'email': 'a@b.com', 'password': 'secret1'})
            finally:
                held.close()
                engine.dispose()

        self.assertEqual(login.status_code, 500)
        self.assertEqual(login.json(), {'message': 'Server error'})
        self.assertEqual(register.status_code, 500)
        self.assertNotEqual(register.json()['message'], 'Email already exists')

    def test_cors_uses_configured_origins(self):
        with TestClient(app) as client:
            response = client.get('/health', headers={'Origin': 'https://app.example.com'})

        self.assertEqual(get_settings().cors_origins, '*')
        self.assertEqual(response.headers['access-control-allow-origin'], '*')
