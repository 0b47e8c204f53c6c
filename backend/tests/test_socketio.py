def test_socket_connect_and_join(sio_client):
    # Ensure we are connected to /ws
    if not sio_client.is_connected('/ws'):
        sio_client.connect(namespace='/ws')
    assert sio_client.is_connected('/ws')

    sio_client.emit('join_user', {'user_id': 1}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'joined' and pkt['args'][0]['room'] == 'user:1' for pkt in received)


def test_join_requires_user_id(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('join_user', {}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'error' for pkt in received)


def test_lifecycle_events_reach_participant_rooms(flask_app, client, users, sio_client):
    alice, bob = users['alice'], users['bob']
    from wordduel import socketio as _sio
    alice_client = _sio.test_client(flask_app, namespace='/ws')
    alice_client.emit('join_user', {'user_id': alice}, namespace='/ws')
    sio_client.emit('join_user', {'user_id': bob}, namespace='/ws')
    alice_client.get_received('/ws')
    sio_client.get_received('/ws')

    duel_id = client.post('/api/duels', json={
        'challenger_id': alice, 'opponent_id': bob, 'word_count': 1,
    }).get_json()['id']
    bob_events = sio_client.get_received('/ws')
    invites = [e for e in bob_events if e['name'] == 'duel_invite']
    assert invites and invites[0]['args'][0]['duel_id'] == duel_id
    # Invite goes to the opponent only
    assert not any(e['name'] == 'duel_invite' for e in alice_client.get_received('/ws'))

    client.post(f'/api/duels/{duel_id}/accept', json={'actor_id': bob})
    assert any(e['name'] == 'duel_accepted' for e in alice_client.get_received('/ws'))

    for user_id in (alice, bob):
        client.post(f'/api/duels/{duel_id}/answers', json={
            'user_id': user_id, 'word_index': 0, 'is_correct': True, 'response_time_ms': 100,
        })
    assert any(e['name'] == 'duel_completed' for e in alice_client.get_received('/ws'))
    assert any(e['name'] == 'duel_completed' for e in sio_client.get_received('/ws'))
    alice_client.disconnect(namespace='/ws')


def test_ping_pong(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('ping', {'n': 1}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'pong' and pkt['args'][0] == {'n': 1} for pkt in received)


def test_leave_user_stops_events(client, users, sio_client):
    bob = users['bob']
    sio_client.emit('join_user', {'user_id': bob}, namespace='/ws')
    sio_client.emit('leave_user', {'user_id': bob}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'left' and pkt['args'][0]['room'] == f'user:{bob}' for pkt in received)

    res = client.post('/api/duels', json={
        'challenger_id': users['alice'], 'opponent_id': bob, 'word_count': 1,
    })
    assert res.status_code == 201
    assert not any(e['name'] == 'duel_invite' for e in sio_client.get_received('/ws'))
