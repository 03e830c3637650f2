def test_index(client):
    res = client.get('/')
    assert res.status_code == 200
    assert res.get_json()['live_games'] == 0


def test_create_and_list_quizzes(client, sample_quiz):
    res = client.post('/api/quizzes', json=sample_quiz)
    assert res.status_code == 201
    created = res.get_json()
    assert created['title'] == 'Capitals'

    res = client.get('/api/quizzes')
    assert res.status_code == 200
    assert res.get_json() == [{'id': created['id'], 'title': 'Capitals'}]

    res = client.get(f"/api/quizzes/{created['id']}")
    assert res.status_code == 200
    quiz = res.get_json()
    assert len(quiz['questions']) == 2
    assert quiz['questions'][0]['correctAnswer'] == 'Paris'


def test_create_quiz_rejects_invalid_data(client):
    res = client.post('/api/quizzes', json={'title': 'No questions', 'questions': []})
    assert res.status_code == 400
    assert 'error' in res.get_json()


def test_unknown_quiz_is_404(client):
    assert client.get('/api/quizzes/12345').status_code == 404


def test_unknown_game_state_is_404(client):
    res = client.get('/api/games/000000/state')
    assert res.status_code == 404


def test_game_state(flask_app, client):
    from quiznight.services.games import Question

    engine = flask_app.extensions['quiznight']
    session = engine.registry.create('host', [Question('Q?', ('a', 'b'), 'a')])
    res = client.get(f'/api/games/{session.game_code}/state')
    assert res.status_code == 200
    state = res.get_json()
    assert state['gameCode'] == session.game_code
    assert state['phase'] == 'lobby'
    assert state['players'] == []
    assert state['timeLimit'] == 20
