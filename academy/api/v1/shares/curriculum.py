from dataclasses import asdict

from fastapi import APIRouter, Query

from academy.libs.curriculum import taxonomy_as_dict
from academy.libs.filters import FilterState

router = APIRouter(prefix="/curriculum", tags=["Curriculum"])


@router.get("")
async def get_curriculum():
    return taxonomy_as_dict()


@router.get("/options")
async def get_curriculum_options(
    curriculum: str | None = Query(None),
    level: str | None = Query(None),
    language: str | None = Query(None),
):
    state = FilterState().with_curriculum(curriculum).with_level(level).with_language(language)
    return {
        "levels": [asdict(lvl) for lvl in state.level_options()],
        "languages": [asdict(lang) for lang in state.language_options()],
        "grades": [asdict(grade) for grade in state.grade_options()],
    }
