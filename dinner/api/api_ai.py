"""Recipe import endpoints: scrape a page into a preview, then save it."""
import logging

from fastapi import APIRouter, Depends

from dinner.api.responses import error_response
from dinner.infra.Store import JsonStore, get_store
from dinner.logic.recipes.extraction import scrape_recipe_from_url, to_recipe
from dinner.logic.recipes.service import save_recipe
from dinner.utilities.validators import ImportSaveInput, ImportScrapeInput

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/recipes/import", tags=["import"])


@router.post("/scrape")
def api_scrape_recipe(body: ImportScrapeInput):
    """Preview only; nothing is stored until /save."""
    outcome = scrape_recipe_from_url(body.url)
    if not outcome:
        status = 502 if outcome.error.startswith("Fetch failed") else 400
        return error_response(outcome, status_code=status)
    return {"ok": True, "recipe": outcome.value.model_dump(), "source_url": body.url}


@router.post("/save", status_code=201)
def api_save_recipe(body: ImportSaveInput, store: JsonStore = Depends(get_store)):
    outcome = save_recipe(store, to_recipe(body.recipe), body.source_url)
    if not outcome:
        return error_response(outcome)
    return {"ok": True, "id": outcome.id}
