"""
Flask web application for site antidote.

Provides an HTTP API to cure pages in background jobs and fetch the results.
"""

import asyncio
import threading
import time
from typing import Dict
from urllib.parse import urlparse

from flask import Flask, Response, request, jsonify

from ..curing import Antidote, Ingredients
from ..utils.errors import AntidoteError
from ..utils.log import get_logger

# Job fields that are returned by the status endpoints
_PUBLIC_FIELDS = (
    'id', 'url', 'status', 'message', 'assets_inlined',
    'errors', 'started_at', 'completed_at',
)


def create_app(run_jobs_in_background: bool = True) -> Flask:
    """
    Create and configure the Flask application.

    Args:
        run_jobs_in_background: Run cure jobs in a daemon thread. When False
            the job runs before the POST request returns.
    """
    app = Flask(__name__)

    # Store for cure jobs
    app.cure_jobs: Dict[str, dict] = {}
    app.job_counter = 0
    app.job_lock = threading.Lock()

    @app.route('/api/cure', methods=['POST'])
    def start_cure():
        """Start a new cure job."""
        data = request.get_json(silent=True)
        if data is None:
            return jsonify({'error': 'No JSON data provided'}), 400
        if not isinstance(data, dict):
            return jsonify({'error': 'Request body must be a JSON object'}), 400

        url = data.get('url') or ''
        if not isinstance(url, str):
            return jsonify({'error': 'URL must be a string'}), 400

        url = url.strip()
        if not url:
            return jsonify({'error': 'URL is required'}), 400

        if not url.startswith(('http://', 'https://')):
            url = 'https://' + url

        try:
            netloc = urlparse(url).netloc
        except ValueError:
            netloc = ''
        if not netloc:
            return jsonify({'error': 'Invalid URL format'}), 400

        try:
            timeout = _optional_number(data.get('timeout'), float)
            concurrency = _optional_number(data.get('concurrency'), int)
        except (TypeError, ValueError) as e:
            return jsonify({'error': f'Invalid parameter value: {e}'}), 400

        if timeout is not None and not 0 < timeout <= 600:
            return jsonify({'error': 'Timeout must be between 0 and 600 seconds'}), 400
        if concurrency is not None and not 1 <= concurrency <= 1000:
            return jsonify({'error': 'Concurrency must be between 1 and 1000'}), 400

        with app.job_lock:
            app.job_counter += 1
            job_id = f"job_{app.job_counter}_{int(time.time())}"

            app.cure_jobs[job_id] = {
                'id': job_id,
                'url': url,
                'status': 'starting',
                'message': 'Initializing...',
                'assets_inlined': 0,
                'errors': [],
                'started_at': time.time(),
                'completed_at': None,
                'html': None,
            }

        ingredients = Ingredients(url=url, timeout=timeout, concurrency=concurrency)

        if run_jobs_in_background:
            thread = threading.Thread(
                target=_run_cure_job,
                args=(app, job_id, ingredients),
                daemon=True
            )
            thread.start()
        else:
            _run_cure_job(app, job_id, ingredients)

        return jsonify({
            'jobId': job_id,
            'message': 'Cure job started',
            'status': app.cure_jobs[job_id]['status']
        }), 202

    @app.route('/api/status/<job_id>')
    def get_status(job_id):
        """Get the status of a cure job."""
        job = app.cure_jobs.get(job_id)
        if not job:
            return jsonify({'error': 'Job not found'}), 404
        return jsonify(_public(job))

    @app.route('/api/jobs')
    def list_jobs():
        """List all cure jobs."""
        jobs = [_public(job) for job in app.cure_jobs.values()]
        jobs.sort(key=lambda x: x.get('started_at', 0), reverse=True)
        return jsonify({'jobs': jobs})

    @app.route('/api/result/<job_id>')
    def get_result(job_id):
        """Return the cured HTML of a completed job."""
        job = app.cure_jobs.get(job_id)
        if not job:
            return jsonify({'error': 'Job not found'}), 404
        if job['status'] != 'completed':
            return jsonify({'error': f"Job is {job['status']}"}), 409
        return Response(job['html'], mimetype='text/html')

    return app


def _optional_number(value, cast):
    if value is None or value == '':
        return None
    return cast(value)


def _public(job: dict) -> dict:
    return {key: job[key] for key in _PUBLIC_FIELDS}


def _run_cure_job(app: Flask, job_id: str, ingredients: Ingredients) -> None:
    """Run a cure job on its own event loop."""
    logger = get_logger("web")
    job = app.cure_jobs[job_id]

    job['status'] = 'running'
    job['message'] = 'Curing page...'

    antidote = Antidote()
    antidote.configure(ingredients)

    loop = asyncio.new_event_loop()
    try:
        html = loop.run_until_complete(antidote.cure())
    except AntidoteError as e:
        logger.warning(f"Cure job {job_id} failed: {e}")
        _fail_job(job, e)
        return
    except Exception as e:
        logger.exception(f"Cure job {job_id} crashed: {e}")
        _fail_job(job, e)
        return
    finally:
        loop.close()
        job['completed_at'] = time.time()

    summary = antidote.summary
    job['html'] = html
    job['status'] = 'completed'
    job['assets_inlined'] = summary.assets_inlined
    job['errors'] = [
        {'error': str(error), 'type': type(error).__name__, 'reference': error.reference}
        for error in summary.errors[:100]
    ]
    job['message'] = f'Completed: {summary.assets_inlined} assets inlined'


def _fail_job(job: dict, error: Exception) -> None:
    job['status'] = 'failed'
    job['message'] = f'Error: {error}'
    job['errors'].append({'error': str(error), 'type': type(error).__name__})


def run_app(host: str = '127.0.0.1', port: int = 5000, debug: bool = False) -> None:
    """Run the Flask web application."""
    app = create_app()
    app.run(host=host, port=port, debug=debug)


if __name__ == '__main__':
    run_app()
