"""
Account administration tests
"""
import json


class TestUserAdministration:

    def test_staff_cannot_list_users(self, client, auth_headers):
        response = client.get('/api/users', headers=auth_headers)

        assert response.status_code == 403

    def test_manager_lists_users(self, client, manager_headers, staff_user):
        response = client.get('/api/users', headers=manager_headers)

        assert response.status_code == 200
        usernames = {u['username'] for u in json.loads(response.data)['data']}
        assert usernames == {'site.manager', 'site.staff'}

    def test_manager_creates_manager(self, client, manager_headers):
        response = client.post('/api/users', headers=manager_headers,
                               json={'username': 'second.lead', 'password': 'SitePass123!', 'role': 'Manager'})

        assert response.status_code == 201
        assert json.loads(response.data)['data']['role'] == 'Manager'

    def test_create_with_invalid_role(self, client, manager_headers):
        response = client.post('/api/users', headers=manager_headers,
                               json={'username': 'x', 'password': 'SitePass123!', 'role': 'Owner'})

        assert response.status_code == 400

    def test_update_keeps_absent_fields(self, client, manager_headers, staff_user):
        response = client.put(f'/api/users/{staff_user.id}', headers=manager_headers,
                              json={'role': 'Manager'})

        assert response.status_code == 200
        data = json.loads(response.data)['data']
        assert data['role'] == 'Manager'
        assert data['username'] == 'site.staff'

    def test_update_to_taken_username(self, client, manager_headers, staff_user):
        response = client.put(f'/api/users/{staff_user.id}', headers=manager_headers,
                              json={'username': 'site.manager'})

        assert response.status_code == 409

    def test_delete_user(self, client, manager_headers, staff_user):
        user_id = staff_user.id

        response = client.delete(f'/api/users/{user_id}', headers=manager_headers)
        assert response.status_code == 200

        response = client.get(f'/api/users/{user_id}', headers=manager_headers)
        assert response.status_code == 404

    def test_cannot_delete_self(self, client, manager_headers, manager_user):
        response = client.delete(f'/api/users/{manager_user.id}', headers=manager_headers)

        assert response.status_code == 400
