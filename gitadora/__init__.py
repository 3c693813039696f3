"""
GITADORA Skill Tracker — Player Skill Scores as a Service
==========================================================
Collects uploaded GITADORA play records, keeps them append-only, and
serves per-player skill breakdowns, skill snapshots over time, a player
leaderboard and per-song score distributions.

Package layout::

    gitadora/
    ├── config.py          # YAML → typed Python config
    ├── constants.py       # Slot limit, skill tiers
    ├── __main__.py        # ``python -m gitadora`` — bootstrap + uvicorn
    ├── database/
    │   ├── engine.py      # SQLAlchemy engine + session helpers
    │   ├── models.py      # ORM models (users, versions, records, history)
    │   └── seed.py        # Default game version seeder
    ├── engine/
    │   ├── skill.py       # Skill aggregation (dedup → partition → top 25)
    │   ├── ranking.py     # Leaderboard from latest snapshots
    │   └── distribution.py # Per-song achievement spread + histogram
    ├── services/
    │   ├── skill_service.py        # Skill lookup for one player
    │   ├── ranking_service.py      # Leaderboard queries
    │   ├── ingest_service.py       # Record upload + snapshot writing
    │   ├── distribution_service.py # Song distribution queries
    │   ├── version_service.py      # Game version administration
    │   └── errors.py               # Domain exceptions
    └── api/
        ├── main.py        # FastAPI app
        ├── deps.py        # Engine / session / config / JWT dependencies
        └── routes/        # REST endpoints
"""

__version__ = "0.1.0"
