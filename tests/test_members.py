"""
Team membership tests
"""
import json


class TestMembers:

    def test_manager_invites_member(self, client, manager_headers, staff_user):
        response = client.post('/api/members/invite', headers=manager_headers,
                               json={'username': 'site.staff'})

        assert response.status_code == 201
        data = json.loads(response.data)['data']
        assert data['user_id'] == staff_user.id
        assert data['username'] == 'site.staff'
        assert data['invited_by_username'] == 'site.manager'

    def test_staff_cannot_invite(self, client, auth_headers, user_factory):
        user_factory('another.worker')

        response = client.post('/api/members/invite', headers=auth_headers,
                               json={'username': 'another.worker'})

        assert response.status_code == 403

    def test_invite_unknown_user(self, client, manager_headers):
        response = client.post('/api/members/invite', headers=manager_headers,
                               json={'username': 'ghost'})

        assert response.status_code == 404

    def test_invite_twice(self, client, manager_headers, staff_user):
        client.post('/api/members/invite', headers=manager_headers, json={'username': 'site.staff'})

        response = client.post('/api/members/invite', headers=manager_headers,
                               json={'username': 'site.staff'})

        assert response.status_code == 409

    def test_list_and_remove(self, client, manager_headers, auth_headers, staff_user):
        invited = json.loads(client.post('/api/members/invite', headers=manager_headers,
                                         json={'username': 'site.staff'}).data)['data']

        listing = json.loads(client.get('/api/members', headers=auth_headers).data)['data']
        assert [m['id'] for m in listing] == [invited['id']]

        response = client.delete(f"/api/members/{invited['id']}", headers=manager_headers)
        assert response.status_code == 200

        response = client.delete(f"/api/members/{invited['id']}", headers=manager_headers)
        assert response.status_code == 404
