"""HTML served to browsers: the login entry point and the room page."""

from __future__ import annotations

from quiz_rooms.constants.ui_constants import (
    PAGE_TITLE,
    SEARCH_PLACEHOLDER,
    UNLOAD_WARNING_MESSAGE,
)

LOGIN_PAGE_HTML = f"""<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>{PAGE_TITLE} – Sign in</title>
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <style>
      :root {{ font-family: 'Inter', system-ui, sans-serif; background: #0b1120; color: #f5f7ff; }}
      body {{ margin: 0; padding: 1.5rem; display: flex; justify-content: center; }}
      .card {{ background: #111a30; border-radius: 0.75rem; padding: 1.5rem; max-width: 24rem; width: 100%; }}
      input {{ width: 100%; box-sizing: border-box; padding: 0.7rem; border-radius: 0.5rem; border: none; margin: 0.5rem 0 1rem; }}
      button {{ border: none; border-radius: 0.75rem; padding: 0.85rem 1.5rem; background: #1f9aa5; color: #fff; cursor: pointer; }}
    </style>
  </head>
  <body>
    <section class="card">
      <h1>{PAGE_TITLE}</h1>
      <p>Sign in to browse and join quiz rooms.</p>
      <input id="display-name" type="text" placeholder="Display name (optional)" />
      <button id="login-button">Sign in</button>
    </section>
    <script>
      document.getElementById('login-button').addEventListener('click', async () => {{
        const displayName = document.getElementById('display-name').value;
        const response = await fetch('/login', {{
          method: 'POST',
          headers: {{ 'Content-Type': 'application/json' }},
          body: JSON.stringify({{ display_name: displayName || null }})
        }});
        if (response.ok) {{
          window.location.href = '/';
        }} else {{
          alert('Unable to sign in.');
        }}
      }});
    </script>
  </body>
</html>
"""

ROOM_PAGE_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>__TITLE__</title>
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <style>
      :root { font-family: 'Inter', system-ui, sans-serif; background: #0b1120; color: #f5f7ff; }
      body { margin: 0; padding: 1.5rem; display: flex; flex-direction: column; gap: 1rem; }
      .card { background: #111a30; border-radius: 0.75rem; padding: 1.25rem; box-shadow: 0 0.5rem 1.5rem rgba(0, 0, 0, 0.4); }
      .hidden { display: none !important; }
      .room { display: flex; gap: 1.5rem; align-items: center; justify-content: space-between; }
      .search-bar input, .modal input { width: 100%; box-sizing: border-box; padding: 0.7rem; border-radius: 0.5rem; border: none; margin-bottom: 0.75rem; }
      button { border: none; border-radius: 0.75rem; padding: 0.7rem 1.2rem; background: #1f9aa5; color: #fff; cursor: pointer; }
      button:disabled { opacity: 0.5; cursor: not-allowed; }
      .modal { position: fixed; inset: 0; background: rgba(0, 0, 0, 0.6); display: flex; align-items: center; justify-content: center; }
      .modal-content { background: #111a30; border-radius: 0.75rem; padding: 1.5rem; width: min(36rem, 90vw); max-height: 90vh; overflow-y: auto; }
      .time-number { display: flex; justify-content: space-between; color: #facc15; }
      .option { margin: 0.4rem 0; }
      .navigation-buttons { display: flex; gap: 0.75rem; justify-content: flex-end; margin-top: 1rem; }
      .progress-container { background: rgba(74, 222, 128, 0.2); border-radius: 999px; overflow: hidden; margin: 1rem 0; }
      .progress-bar { background: #4ade80; color: #0b1120; padding: 0.3rem 0; text-align: center; white-space: nowrap; }
    </style>
    <script>
      window.MathJax = { tex: { inlineMath: [['$','$']], displayMath: [['$$','$$']] }, svg: { fontCache: 'global' } };
    </script>
    <script defer src="https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-mml-chtml.js"></script>
  </head>
  <body>
    <section class="card search-bar">
      <input id="search" type="text" placeholder="__SEARCH_PLACEHOLDER__" />
    </section>
    <section id="room-list"></section>

    <div id="join-modal" class="modal hidden">
      <div class="modal-content">
        <h2>Enter Room</h2>
        <input id="entered-name" type="text" placeholder="Your Name" />
        <input id="entered-password" type="password" placeholder="Password" />
        <div class="navigation-buttons">
          <button id="join-button">Enter</button>
          <button id="join-close">Close</button>
        </div>
      </div>
    </div>

    <div id="quiz-modal" class="modal hidden">
      <div class="modal-content">
        <h4>Quiz</h4>
        <div class="time-number">
          <p id="time-remaining"></p>
          <p id="question-position"></p>
        </div>
        <div id="question-html"></div>
        <div id="options"></div>
        <div class="navigation-buttons">
          <button id="prev-button">Prev</button>
          <button id="next-button">Next</button>
          <button id="submit-button">Submit</button>
        </div>
      </div>
    </div>

    <div id="review-modal" class="modal hidden">
      <div class="modal-content">
        <h3>Your Answers:</h3>
        <ul id="review-list"></ul>
        <div class="navigation-buttons">
          <button id="review-close">Close</button>
        </div>
      </div>
    </div>

    <div id="result-modal" class="modal hidden">
      <div class="modal-content">
        <h2>Quiz Result</h2>
        <p id="result-correct"></p>
        <p id="result-incorrect"></p>
        <div class="progress-container"><div id="progress-bar" class="progress-bar"></div></div>
        <button id="result-close">Close</button>
      </div>
    </div>

    <script>
      const UNLOAD_WARNING = "__UNLOAD_WARNING__";
      let quizPoll = null;
      let guardUnload = false;

      function setVisibility(id, isVisible) {
        document.getElementById(id).classList.toggle('hidden', !isVisible);
      }

      async function api(path, options = {}) {
        const response = await fetch(path, {
          headers: { 'Content-Type': 'application/json' },
          ...options
        });
        const body = await response.json().catch(() => ({}));
        if (response.status === 401) {
          alert(body.detail || 'login is required');
          window.location.href = '/login';
          throw new Error('unauthenticated');
        }
        if (!response.ok) {
          throw new Error(body.detail || 'Request failed.');
        }
        return body;
      }

      function post(path, payload) {
        return api(path, { method: 'POST', body: JSON.stringify(payload || {}) });
      }

      function typeset() {
        if (window.MathJax && window.MathJax.typesetPromise) {
          window.MathJax.typesetPromise();
        }
      }

      function renderRooms(rooms) {
        const list = document.getElementById('room-list');
        list.innerHTML = '';
        rooms.forEach(room => {
          const card = document.createElement('div');
          card.className = 'card room';
          const info = document.createElement('div');
          info.innerHTML = '<b>Subject: </b><span></span><br /><b>Owner: </b><span></span>';
          info.querySelectorAll('span')[0].textContent = room.subject;
          info.querySelectorAll('span')[1].textContent = room.owner_name;
          const button = document.createElement('button');
          button.textContent = 'Enter Room';
          button.addEventListener('click', () => enterRoom(room.id));
          card.append(info, button);
          list.appendChild(card);
        });
      }

      async function loadRooms() {
        const search = document.getElementById('search').value;
        const body = await api('/rooms?search=' + encodeURIComponent(search));
        renderRooms(body.rooms);
      }

      async function enterRoom(roomId) {
        await post('/rooms/' + encodeURIComponent(roomId) + '/enter');
        setVisibility('join-modal', true);
      }

      async function joinRoom() {
        try {
          await post('/join', {
            name: document.getElementById('entered-name').value,
            password: document.getElementById('entered-password').value
          });
          setVisibility('join-modal', false);
          await refreshQuiz();
        } catch (error) {
          alert(error.message);
          const state = await api('/quiz');
          setVisibility('join-modal', state.join_modal_open);
        }
      }

      function renderQuiz(state) {
        guardUnload = state.needs_unload_warning;
        setVisibility('quiz-modal', state.quiz_visible);
        setVisibility('review-modal', state.review_visible);
        setVisibility('result-modal', state.result_visible);
        if (!state.quiz_visible) {
          return;
        }
        document.getElementById('time-remaining').textContent = 'Time remaining: ' + state.time_remaining;
        document.getElementById('question-position').textContent =
          (state.current_index + 1) + ' / ' + state.question_count;
        document.getElementById('question-html').innerHTML = state.question_html || '';
        const options = document.getElementById('options');
        options.innerHTML = '';
        (state.options || []).forEach((optionHtml, index) => {
          const value = String(index + 1);
          const row = document.createElement('div');
          row.className = 'option';
          const input = document.createElement('input');
          input.type = 'radio';
          input.name = 'question-' + state.current_index;
          input.value = value;
          input.checked = state.current_answer === value;
          input.addEventListener('change', () => post('/quiz/answer', { option: index + 1 }));
          const label = document.createElement('label');
          label.innerHTML = optionHtml;
          row.append(input, label);
          options.appendChild(row);
        });
        document.getElementById('prev-button').disabled = state.current_index === 0;
        setVisibility('next-button', !state.is_last_question);
        setVisibility('submit-button', state.is_last_question);
        typeset();
      }

      async function renderReviewAndResult() {
        const review = await api('/quiz/review');
        const list = document.getElementById('review-list');
        list.innerHTML = '';
        review.rows.forEach(row => {
          const item = document.createElement('li');
          const prompt = document.createElement('strong');
          prompt.textContent = row.question;
          item.append(prompt, document.createElement('br'),
            'Your Answer: ' + row.your_answer, document.createElement('br'),
            'Correct Answer: ' + row.correct_answer);
          list.appendChild(item);
        });
        const result = await api('/result');
        if (result.result) {
          document.getElementById('result-correct').textContent = 'Correct Answers: ' + result.result.correct;
          document.getElementById('result-incorrect').textContent = 'Incorrect Answers: ' + result.result.incorrect;
          const bar = document.getElementById('progress-bar');
          bar.style.width = result.result.percentage + '%';
          bar.textContent = result.result.formatted_percentage;
        }
      }

      async function refreshQuiz() {
        const state = await api('/quiz');
        renderQuiz(state);
        if (state.review_visible || state.result_visible) {
          await renderReviewAndResult();
        }
        if (state.quiz_visible && !quizPoll) {
          quizPoll = setInterval(refreshQuiz, 1000);
        } else if (!state.quiz_visible && quizPoll) {
          clearInterval(quizPoll);
          quizPoll = null;
        }
      }

      async function quizAction(path) {
        try {
          await post(path);
        } catch (error) {
          alert(error.message);
        }
        await refreshQuiz();
      }

      window.addEventListener('beforeunload', (event) => {
        if (guardUnload) {
          event.preventDefault();
          event.returnValue = UNLOAD_WARNING;
          return UNLOAD_WARNING;
        }
      });

      document.getElementById('search').addEventListener('input', loadRooms);
      document.getElementById('join-button').addEventListener('click', joinRoom);
      document.getElementById('join-close').addEventListener('click', async () => {
        await post('/join/close');
        setVisibility('join-modal', false);
      });
      document.getElementById('prev-button').addEventListener('click', () => quizAction('/quiz/prev'));
      document.getElementById('next-button').addEventListener('click', () => quizAction('/quiz/next'));
      document.getElementById('submit-button').addEventListener('click', () => quizAction('/quiz/submit'));
      document.getElementById('review-close').addEventListener('click', () => quizAction('/quiz/close'));
      document.getElementById('result-close').addEventListener('click', () => quizAction('/result/close'));

      api('/identity').then(() => {
        loadRooms().catch(error => console.error('Error loading rooms:', error));
        refreshQuiz().catch(error => console.error('Error loading quiz:', error));
      }).catch(error => console.error('Error fetching identity:', error));
    </script>
  </body>
</html>
""".replace("__TITLE__", PAGE_TITLE).replace(
    "__SEARCH_PLACEHOLDER__", SEARCH_PLACEHOLDER
).replace("__UNLOAD_WARNING__", UNLOAD_WARNING_MESSAGE)
