"""
Integration Tests for the Agents, User and Invite APIs

Outbound Supabase calls are patched where the services import them.
"""
import uuid

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from rest_framework import status

from apps.core.exceptions import UpstreamError
from apps.core.models import Profile


@pytest.mark.django_db
class TestAgentDirectory:

    def test_agent_sees_self_and_downline(self, agent_client, sub_agent, outsider):
        response = agent_client.get('/api/agents/')

        assert response.status_code == status.HTTP_200_OK
        assert [a['name'] for a in response.json()['agents']] == ['Adam Agent', 'Sam Sub']

    def test_downline_counts(self, owner_client, sub_agent):
        agents = {a['name']: a for a in owner_client.get('/api/agents/').json()['agents']}

        assert agents['Olivia Owner']['downline_count'] == 1
        assert agents['Adam Agent']['downline_count'] == 1
        assert agents['Sam Sub']['downline_count'] == 0

    def test_admin_sees_everyone(self, admin_client, sub_agent, outsider):
        assert admin_client.get('/api/agents/').json()['count'] == 5

    def test_search(self, owner_client, sub_agent):
        response = owner_client.get('/api/agents/', {'q': 'sam'})

        assert [a['name'] for a in response.json()['agents']] == ['Sam Sub']

    def test_webhook_url_never_listed(self, owner, owner_client):
        owner.discord_webhook_url = 'https://discord.test/hook'
        owner.save()

        agents = owner_client.get('/api/agents/').json()['agents']

        assert all('discord_webhook_url' not in a for a in agents)

    def test_upline_options_exclude_own_subtree(self, owner_client, agent, sub_agent):
        response = owner_client.get('/api/agents/upline-options', {'agent_id': str(agent.id)})

        assert [o['name'] for o in response.json()['options']] == ['Olivia Owner']

    def test_upline_options_privileged_only(self, agent_client):
        response = agent_client.get('/api/agents/upline-options')

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestOwnProfile:

    def test_profile_includes_private_fields(self, agent_client):
        body = agent_client.get('/api/user/profile').json()

        assert body['must_set_password'] is False
        assert 'discord_webhook_url' in body

    def test_update_profile(self, agent, agent_client):
        response = agent_client.patch('/api/user/profile', {
            'first_name': 'Adrian',
            'theme': 'gold',
            'discord_webhook_url': 'https://discord.test/hook',
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        agent.refresh_from_db()
        assert agent.first_name == 'Adrian'
        assert agent.theme == 'gold'
        assert agent.discord_webhook_url == 'https://discord.test/hook'

    def test_webhook_must_be_https(self, agent_client):
        response = agent_client.patch(
            '/api/user/profile', {'discord_webhook_url': 'http://insecure'}, format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_role_not_self_editable(self, agent, agent_client):
        agent_client.patch('/api/user/profile', {'role': 'admin', 'is_agency_owner': True}, format='json')

        agent.refresh_from_db()
        assert agent.role == 'agent'
        assert agent.is_agency_owner is False

    def test_clear_must_set_password(self, agent, agent_client):
        agent.must_set_password = True
        agent.save()

        agent_client.patch('/api/user/profile', {'must_set_password': False}, format='json')

        agent.refresh_from_db()
        assert agent.must_set_password is False

    def test_theme_preview(self, agent_client):
        body = agent_client.get('/api/user/theme', {'theme': 'green'}).json()

        assert body['theme'] == 'green'
        assert body['vars']['accent'] == '#22c55e'

    def test_unknown_theme_falls_back(self, agent_client):
        assert agent_client.get('/api/user/theme', {'theme': 'plaid'}).json()['theme'] == 'blue'


@pytest.mark.django_db
class TestAvatarUpload:

    def test_upload(self, agent, agent_client, mocker):
        mock_upload = mocker.patch(
            'apps.agents.services.storage_upload',
            return_value='http://localhost:54321/storage/v1/object/public/avatars/x.png',
        )
        upload = SimpleUploadedFile('me.PNG', b'\x89PNG fake', content_type='image/png')

        response = agent_client.post('/api/user/avatar', {'file': upload}, format='multipart')

        assert response.status_code == status.HTTP_200_OK
        bucket, path, _, content_type = mock_upload.call_args.args
        assert bucket == 'avatars'
        assert path == f'{agent.id}.png'
        assert content_type == 'image/png'
        agent.refresh_from_db()
        assert agent.avatar_url.endswith('x.png')

    def test_rejects_other_types(self, agent_client, mocker):
        mock_upload = mocker.patch('apps.agents.services.storage_upload')
        upload = SimpleUploadedFile('notes.txt', b'hello', content_type='text/plain')

        response = agent_client.post('/api/user/avatar', {'file': upload}, format='multipart')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        mock_upload.assert_not_called()

    def test_file_required(self, agent_client):
        response = agent_client.post('/api/user/avatar', {}, format='multipart')

        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestInvites:

    def test_agents_cannot_invite(self, agent_client):
        response = agent_client.post('/api/admin/invite', {'email': 'x@example.com'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_owner_invite_defaults_upline_to_owner(self, owner, owner_client, mocker):
        new_id = uuid.uuid4()
        mock_invite = mocker.patch('apps.agents.services.supabase_invite_user', return_value={'id': str(new_id)})

        response = owner_client.post('/api/admin/invite', {
            'email': 'New.Agent@Example.com', 'first_name': 'Nia', 'comp': 85,
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {'ok': True, 'user_id': str(new_id)}
        assert mock_invite.call_args.args[0] == 'new.agent@example.com'
        assert mock_invite.call_args.kwargs['redirect_to'].endswith('/login')
        profile = Profile.objects.get(id=new_id)
        assert profile.upline_id == owner.id
        assert profile.comp == 85
        assert profile.role == 'agent'

    def test_owner_cannot_invite_admin(self, owner_client, mocker):
        mock_invite = mocker.patch('apps.agents.services.supabase_invite_user')

        response = owner_client.post('/api/admin/invite', {'email': 'a@x.com', 'role': 'admin'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        mock_invite.assert_not_called()

    def test_owner_cannot_place_outside_tree(self, owner_client, outsider, mocker):
        mocker.patch('apps.agents.services.supabase_invite_user')

        response = owner_client.post('/api/admin/invite', {
            'email': 'a@x.com', 'upline_id': str(outsider.id),
        }, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_email_required(self, admin_client):
        response = admin_client.post('/api/admin/invite', {}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['error'] == 'Email required'

    def test_invalid_comp(self, admin_client):
        response = admin_client.post('/api/admin/invite', {'email': 'a@x.com', 'comp': 87}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_unknown_upline(self, admin_client):
        response = admin_client.post('/api/admin/invite', {
            'email': 'a@x.com', 'upline_id': str(uuid.uuid4()),
        }, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_upstream_failure_surfaces(self, admin_client, mocker):
        mocker.patch(
            'apps.agents.services.supabase_invite_user',
            side_effect=UpstreamError('A user with this email address has already been registered'),
        )

        response = admin_client.post('/api/admin/invite', {'email': 'dup@x.com'}, format='json')

        assert response.status_code == status.HTTP_502_BAD_GATEWAY
        assert 'already been registered' in response.json()['error']

    def test_pin_invite(self, admin_client, mocker):
        new_id = uuid.uuid4()
        mock_create = mocker.patch(
            'apps.agents.services.supabase_create_user', return_value={'user': {'id': str(new_id)}},
        )

        response = admin_client.post('/api/admin/invite-pin', {
            'email': 'pin@x.com', 'role': 'admin',
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        pin = response.json()['pin']
        assert len(pin) == 6 and pin.isdigit()
        assert mock_create.call_args.args[1] == pin
        profile = Profile.objects.get(id=new_id)
        assert profile.must_set_password is True
        assert profile.role == 'admin'


@pytest.mark.django_db
class TestAgentEdits:

    def test_owner_edits_comp(self, owner_client, agent):
        response = owner_client.patch(f'/api/agents/{agent.id}', {'comp': 95}, format='json')

        assert response.status_code == status.HTTP_200_OK
        agent.refresh_from_db()
        assert agent.comp == 95

    def test_owner_cannot_change_role(self, owner_client, agent):
        response = owner_client.patch(f'/api/agents/{agent.id}', {'role': 'admin'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_admin_changes_role(self, admin_client, agent):
        response = admin_client.patch(f'/api/agents/{agent.id}', {'is_agency_owner': True}, format='json')

        assert response.status_code == status.HTTP_200_OK
        agent.refresh_from_db()
        assert agent.is_agency_owner is True

    def test_owner_cannot_edit_outside_tree(self, owner_client, outsider):
        response = owner_client.patch(f'/api/agents/{outsider.id}', {'comp': 90}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_cycle_rejected(self, admin_client, owner, sub_agent):
        response = admin_client.patch(f'/api/agents/{owner.id}', {'upline_id': str(sub_agent.id)}, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT
        owner.refresh_from_db()
        assert owner.upline_id is None

    def test_owner_cannot_detach_downline(self, owner, owner_client, agent):
        response = owner_client.patch(f'/api/agents/{agent.id}', {'upline_id': None}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        agent.refresh_from_db()
        assert agent.upline_id == owner.id

    def test_owner_cannot_detach_downline_by_position(self, owner, owner_client, agent):
        response = owner_client.post(f'/api/agents/{agent.id}/position', {'upline_id': None}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        agent.refresh_from_db()
        assert agent.upline_id == owner.id

    def test_admin_can_detach(self, admin_client, agent):
        response = admin_client.patch(f'/api/agents/{agent.id}', {'upline_id': None}, format='json')

        assert response.status_code == status.HTTP_200_OK
        agent.refresh_from_db()
        assert agent.upline_id is None

    def test_owner_cannot_edit_self(self, owner, owner_client):
        response = owner_client.patch(f'/api/agents/{owner.id}', {'comp': 200}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        owner.refresh_from_db()
        assert owner.comp != 200

    def test_owner_cannot_reposition_self(self, owner, owner_client, agent):
        response = owner_client.post(f'/api/agents/{owner.id}/position', {'comp': 200}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_comp_only_position_change_keeps_upline(self, owner, owner_client, agent):
        response = owner_client.post(f'/api/agents/{agent.id}/position', {'comp': 90}, format='json')

        assert response.status_code == status.HTTP_200_OK
        agent.refresh_from_db()
        assert agent.upline_id == owner.id
        assert agent.comp == 90

    def test_self_upline_rejected(self, admin_client, agent):
        response = admin_client.post(f'/api/agents/{agent.id}/position', {'upline_id': str(agent.id)}, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_position_change(self, owner_client, owner, agent, sub_agent):
        response = owner_client.post(f'/api/agents/{sub_agent.id}/position', {
            'upline_id': str(owner.id), 'comp': 100, 'effective_date': '2026-04-01',
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        sub_agent.refresh_from_db()
        assert sub_agent.upline_id == owner.id
        assert sub_agent.comp == 100
