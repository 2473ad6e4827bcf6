"""
project: sewergen
module: sewer_api.py

Sewer generation HTTP routes.

Maps are generated on demand from (seed, width, height) and kept in a small
in-process cache; identical requests return identical maps.
"""

import hashlib
import os
import random
import threading

from flask import Blueprint, Response, current_app, jsonify, request

from sewergen.logging_utils import get_logger
from sewergen.sewer import GenerationFailed, Sewer, SewerConfig, SewerConfigError, SewerSpec, render_text

bp_sewer = Blueprint('sewer_api', __name__)
_log = get_logger("sewer_api")

SEED_MAX_INT = 9223372036854775807

# Simple in-process cache (seed,width,height)->Sewer. Guarded by a lock for threaded servers.
_sewer_cache = {}
_sewer_cache_lock = threading.Lock()
_SEWER_CACHE_MAX = 8  # small LRU-ish manual cap


def _coerce_seed(payload_seed):
    """Convert provided seed (int or str) into bounded 64-bit signed int."""
    if payload_seed is None:
        return random.randint(1, 1_000_000)
    if isinstance(payload_seed, int):
        return payload_seed % SEED_MAX_INT
    if isinstance(payload_seed, str):
        s = payload_seed.strip()
        if not s:
            return random.randint(1, 1_000_000)
        if s.isdigit():
            return int(s) % SEED_MAX_INT
        h = hashlib.sha256(s.encode('utf-8')).digest()
        return int.from_bytes(h[:8], 'big') % SEED_MAX_INT
    return random.randint(1, 1_000_000)


def get_cached_sewer(seed: int, width: int, height: int, config: SewerConfig) -> Sewer:
    if os.environ.get("SEWER_DISABLE_CACHE") == "1":
        return Sewer.generate(SewerSpec(width, height), random.Random(seed), config)
    key = (seed, width, height)
    with _sewer_cache_lock:
        sewer = _sewer_cache.get(key)
        if sewer is not None:
            # refresh recency
            _sewer_cache.pop(key)
            _sewer_cache[key] = sewer
            return sewer
    sewer = Sewer.generate(SewerSpec(width, height), random.Random(seed), config)
    with _sewer_cache_lock:
        _sewer_cache[key] = sewer
        while len(_sewer_cache) > _SEWER_CACHE_MAX:
            _sewer_cache.pop(next(iter(_sewer_cache)))
    return sewer


def clear_cache():
    with _sewer_cache_lock:
        _sewer_cache.clear()


def _request_size():
    cfg = current_app.config
    width = request.args.get('width', default=cfg['SEWER_DEFAULT_WIDTH'], type=int)
    height = request.args.get('height', default=cfg['SEWER_DEFAULT_HEIGHT'], type=int)
    if width > cfg['SEWER_MAX_WIDTH'] or height > cfg['SEWER_MAX_HEIGHT']:
        raise SewerConfigError(
            f"requested {width}x{height} exceeds limit {cfg['SEWER_MAX_WIDTH']}x{cfg['SEWER_MAX_HEIGHT']}"
        )
    return width, height


def _generate_for_request():
    seed = _coerce_seed(request.args.get('seed'))
    width, height = _request_size()
    config = SewerConfig.from_env()
    if config.max_attempts is None:
        config.max_attempts = current_app.config['SEWER_API_MAX_ATTEMPTS']
    return seed, get_cached_sewer(seed, width, height, config)


@bp_sewer.errorhandler(SewerConfigError)
def _config_error(e):
    return jsonify({"error": str(e)}), 400


@bp_sewer.errorhandler(GenerationFailed)
def _generation_failed(e):
    _log.warn(event="sewer_api_generation_failed", attempts=e.attempts)
    return jsonify({"error": str(e), "attempts": e.attempts}), 503


@bp_sewer.route('/api/sewer/map', methods=['GET'])
def sewer_map():
    """Generate (or fetch from cache) a sewer map.

    Query (all optional): seed=<int|str>, width=<int>, height=<int>.
    Response: { "seed", "width", "height", "start", "goal", "lights",
                "rows", "legend", "attempts" }
    """
    seed, sewer = _generate_for_request()
    data = sewer.to_dict()
    data["seed"] = seed
    return jsonify(data)


@bp_sewer.route('/api/sewer/map.txt', methods=['GET'])
def sewer_map_text():
    seed, sewer = _generate_for_request()
    body = f"RNG Seed: {seed}\n" + render_text(sewer.map) + "\n"
    return Response(body, mimetype="text/plain")
