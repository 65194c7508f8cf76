"""
Tool management tests for Tool Tracker
Tests tool registration, barcode lookup, availability and deletion guards
"""
import pytest
import json
import uuid
from datetime import timedelta

from tooltracker.utils.helpers import utcnow


class TestToolCreation:
    """Test registering tools"""

    def test_create_tool(self, client):
        """Test registering a scanned tool"""
        response = client.post('/api/tools', json={
            'tin': 'ABC123',
            'toolType': 'Drill'
        })

        assert response.status_code == 201
        data = json.loads(response.data)
        assert data['message'] == 'Tool created successfully'
        assert data['data']['tin'] == 'ABC123'
        assert data['data']['toolType'] == 'Drill'
        assert data['data']['dateAdded'] == utcnow().date().isoformat()
        assert data['data']['createdAt'].endswith('Z')

    def test_duplicate_tin_conflict(self, client, test_tool):
        """Test a TIN can only be registered once"""
        response = client.post('/api/tools', json={
            'tin': 'ABC123',
            'toolType': 'Hammer'
        })

        assert response.status_code == 409
        data = json.loads(response.data)
        assert data['success'] is False
        assert data['error'] == 'Tool with this TIN already exists'

    def test_tin_is_not_html_escaped(self, client):
        """Test TINs are stored exactly as scanned"""
        response = client.post('/api/tools', json={
            'tin': 'A&B<1>',
            'toolType': 'Saw'
        })

        assert response.status_code == 201
        assert json.loads(response.data)['data']['tin'] == 'A&B<1>'

    @pytest.mark.parametrize('tin', [None, '', '   ', 'x' * 256])
    def test_invalid_tin(self, client, tin):
        """Test TIN must be a non-blank string within length"""
        response = client.post('/api/tools', json={
            'tin': tin,
            'toolType': 'Drill'
        })

        assert response.status_code == 400
        assert json.loads(response.data)['error'] == \
            'Tool identification number (TIN) is required and must be valid'

    def test_missing_tool_type(self, client):
        """Test tool type is required"""
        response = client.post('/api/tools', json={'tin': 'ABC123'})

        assert response.status_code == 400
        assert json.loads(response.data)['error'] == 'Tool type is required and must be valid'


class TestToolListing:
    """Test listing and filtering tools"""

    def test_list_tools(self, client, tool_factory):
        """Test list endpoint with pagination"""
        for _ in range(3):
            tool_factory()

        response = client.get('/api/tools')

        assert response.status_code == 200
        data = json.loads(response.data)
        assert len(data['data']) == 3
        assert data['pagination']['total'] == 3
        assert data['pagination']['limit'] == 20

    def test_filter_by_tool_type(self, client, tool_factory):
        """Test tool type substring filter"""
        tool_factory(tool_type='Cordless Drill')
        tool_factory(tool_type='Hammer')

        response = client.get('/api/tools?toolType=drill')

        data = json.loads(response.data)
        assert [tool['toolType'] for tool in data['data']] == ['Cordless Drill']

    def test_filter_by_assignment_state(self, client, test_job, tool_factory, assignment_factory):
        """Test isAssigned splits tools into out and in the shed"""
        out = tool_factory(tin='OUT-1')
        tool_factory(tin='IN-1')
        assignment_factory(test_job, out)

        assigned = json.loads(client.get('/api/tools?isAssigned=true').data)
        unassigned = json.loads(client.get('/api/tools?isAssigned=false').data)

        assert [tool['tin'] for tool in assigned['data']] == ['OUT-1']
        assert [tool['tin'] for tool in unassigned['data']] == ['IN-1']

    def test_filter_by_job(self, client, job_factory, tool_factory, assignment_factory):
        """Test jobId filter returns tools currently out with that job"""
        job_a = job_factory(company='A')
        job_b = job_factory(company='B')
        assignment_factory(job_a, tool_factory(tin='A-1'))
        assignment_factory(job_b, tool_factory(tin='B-1'))

        response = client.get(f'/api/tools?jobId={job_a.job_id}')

        data = json.loads(response.data)
        assert [tool['tin'] for tool in data['data']] == ['A-1']

    def test_filter_by_invalid_job_id(self, client):
        """Test jobId filter must be a UUID"""
        response = client.get('/api/tools?jobId=abc')

        assert response.status_code == 400


class TestAvailableTools:
    """Test the available tools view"""

    def test_available_excludes_tools_out(self, client, test_job, tool_factory, assignment_factory):
        """Test tools with an open assignment are not available"""
        out = tool_factory(tin='OUT-1')
        back = tool_factory(tin='BACK-1')
        tool_factory(tin='NEW-1')
        assignment_factory(test_job, out)
        assignment_factory(test_job, back, returned_at=utcnow())

        response = client.get('/api/tools/available')

        data = json.loads(response.data)
        assert sorted(tool['tin'] for tool in data['data']) == ['BACK-1', 'NEW-1']
        assert data['message'] == 'Found 2 available tools'


class TestToolLookup:
    """Test single tool retrieval"""

    def test_lookup_by_tin(self, client, test_job, test_tool, assignment_factory):
        """Test barcode lookup reports the current job"""
        assignment_factory(test_job, test_tool)

        response = client.get('/api/tools/by-tin/ABC123')

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data['data']['toolId'] == str(test_tool.tool_id)
        assert data['data']['isCurrentlyAssigned'] is True
        assert data['data']['currentJob']['company'] == 'Acme'

    def test_lookup_by_tin_in_shed(self, client, test_tool):
        """Test barcode lookup of a tool nobody has"""
        response = client.get('/api/tools/by-tin/ABC123')

        data = json.loads(response.data)
        assert data['data']['isCurrentlyAssigned'] is False
        assert data['data']['currentJob'] is None

    def test_lookup_ignores_surrounding_whitespace(self, client):
        """Test a scan with trailing whitespace finds the trimmed TIN"""
        client.post('/api/tools', json={'tin': 'ABC123 ', 'toolType': 'Drill'})

        response = client.get('/api/tools/by-tin/ABC123%20')

        assert response.status_code == 200
        assert json.loads(response.data)['data']['tin'] == 'ABC123'

    def test_lookup_unknown_tin(self, client):
        """Test barcode lookup of an unregistered TIN"""
        response = client.get('/api/tools/by-tin/NOPE')

        assert response.status_code == 404
        assert json.loads(response.data)['error'] == 'Tool not found'

    def test_get_tool_with_history(self, client, job_factory, test_tool, assignment_factory):
        """Test tool detail carries its job history, newest first"""
        now = utcnow()
        old_job = job_factory(company='Old Co')
        new_job = job_factory(company='New Co')
        assignment_factory(old_job, test_tool, assigned_at=now - timedelta(days=10),
                           returned_at=now - timedelta(days=5))
        assignment_factory(new_job, test_tool, assigned_at=now - timedelta(days=1))

        response = client.get(f'/api/tools/{test_tool.tool_id}')

        assert response.status_code == 200
        data = json.loads(response.data)['data']
        assert [entry['job']['company'] for entry in data['jobHistory']] == ['New Co', 'Old Co']
        assert data['currentJob']['company'] == 'New Co'
        assert data['isCurrentlyAssigned'] is True

    def test_get_unknown_tool(self, client):
        """Test fetching a tool that does not exist"""
        response = client.get(f'/api/tools/{uuid.uuid4()}')

        assert response.status_code == 404


class TestToolUpdate:
    """Test updating tools"""

    def test_update_tool_type(self, client, test_tool):
        """Test changing the tool type"""
        response = client.put(f'/api/tools/{test_tool.tool_id}', json={'toolType': 'Impact Driver'})

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data['data']['toolType'] == 'Impact Driver'
        assert data['data']['tin'] == 'ABC123'

    def test_tin_cannot_be_updated(self, client, test_tool):
        """Test the TIN is not an editable field"""
        response = client.put(f'/api/tools/{test_tool.tool_id}', json={'tin': 'XYZ999'})

        assert response.status_code == 400
        assert json.loads(response.data)['error'] == 'No valid fields to update'


class TestToolDeletion:
    """Test deleting tools"""

    def test_delete_unused_tool(self, client, test_tool):
        """Test a tool that never left the shed can be deleted"""
        tool_id = str(test_tool.tool_id)

        response = client.delete(f'/api/tools/{tool_id}')

        assert response.status_code == 200
        assert client.get(f'/api/tools/{tool_id}').status_code == 404

    def test_cannot_delete_assigned_tool(self, client, test_job, test_tool, assignment_factory):
        """Test tools with assignment history are kept"""
        assignment_factory(test_job, test_tool, returned_at=utcnow())

        response = client.delete(f'/api/tools/{test_tool.tool_id}')

        assert response.status_code == 409
        assert json.loads(response.data)['error'] == 'Cannot delete tool that has been assigned to jobs'
