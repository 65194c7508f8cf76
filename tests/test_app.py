"""
Application-level tests for Tool Tracker
Tests health check, error envelope, request IDs and CLI commands
"""
import json

from tooltracker.models import Job, Tool, JobToTool


class TestHealth:
    """Test the health endpoint"""

    def test_health(self, client):
        response = client.get('/health')

        assert response.status_code == 200
        assert json.loads(response.data) == {'status': 'healthy', 'service': 'tooltracker'}


class TestErrorEnvelope:
    """Test errors share the JSON envelope"""

    def test_unknown_route(self, client):
        """Test unknown routes answer with the error envelope"""
        response = client.get('/api/nothing-here')

        assert response.status_code == 404
        data = json.loads(response.data)
        assert data['success'] is False
        assert data['error']

    def test_method_not_allowed(self, client):
        """Test unsupported methods answer with the error envelope"""
        response = client.patch('/api/jobs')

        assert response.status_code == 405
        assert json.loads(response.data)['success'] is False

    def test_success_envelope(self, client):
        """Test success responses carry success and data"""
        response = client.get('/api/tools/available')

        data = json.loads(response.data)
        assert data['success'] is True
        assert data['data'] == []
        assert 'error' not in data


class TestRequestId:
    """Test request ID propagation"""

    def test_request_id_generated(self, client):
        response = client.get('/health')

        assert response.headers.get('X-Request-ID')

    def test_request_id_echoed(self, client):
        response = client.get('/health', headers={'X-Request-ID': 'scan-gun-42'})

        assert response.headers.get('X-Request-ID') == 'scan-gun-42'


class TestCommands:
    """Test Flask CLI commands"""

    def test_seed_demo(self, app):
        runner = app.test_cli_runner()

        result = runner.invoke(args=['seed-demo'])

        assert 'Seeded 5 tools and 2 jobs.' in result.output
        assert Tool.query.count() == 5
        assert Job.query.count() == 2
        assert JobToTool.query.filter(JobToTool.returned_at.is_(None)).count() == 3

    def test_seed_demo_skips_populated_database(self, app, test_tool):
        runner = app.test_cli_runner()

        result = runner.invoke(args=['seed-demo'])

        assert 'skipping seed' in result.output
        assert Tool.query.count() == 1
