import json

from ..models import Category, Prompt
from ..storage import Storage
from ..template import missing_variables


def _summary(p: Prompt) -> dict:
    return {
        "id": p.id,
        "name": p.name,
        "category": str(p.category),
        "description": p.description,
        "variables": p.variables,
    }


def register_tools(mcp, storage: Storage) -> None:
    @mcp.tool()
    def prompt_save(
        name: str,
        content: str,
        category: str = "template",
        description: str = "",
        tags: list[str] | None = None,
    ) -> str:
        """Save a new prompt. Variables use {{variable_name}} syntax."""
        prompt = Prompt.create(
            name=name,
            category=Category.parse(category),
            description=description,
            content=content,
            tags=tags,
        )
        bank = storage.load()
        bank.add(prompt)
        storage.save(bank)
        result = {
            "status": "saved",
            "id": prompt.id,
            "name": prompt.name,
            "variables": prompt.variables,
            "category": str(prompt.category),
        }
        return json.dumps(result)

    @mcp.tool()
    def prompt_get(key: str) -> str:
        """Get a prompt by id or name."""
        prompt = storage.load().get(key)
        return json.dumps(prompt.to_dict())

    @mcp.tool()
    def prompt_apply(
        key: str,
        variables: dict[str, str] | None = None,
    ) -> str:
        """Render a prompt by filling in {{variables}}. Unfilled placeholders are kept as-is."""
        prompt = storage.load().get(key)
        vars_dict = variables or {}
        result = {
            "id": prompt.id,
            "name": prompt.name,
            "rendered": prompt.render(vars_dict),
            "missing": missing_variables(prompt.content, vars_dict),
        }
        return json.dumps(result)

    @mcp.tool()
    def prompt_list(category: str | None = None) -> str:
        """List all prompts, optionally filtered by category."""
        bank = storage.load()
        if category:
            prompts = bank.filter_by_category(Category.parse(category))
        else:
            prompts = bank.prompts
        return json.dumps([_summary(p) for p in prompts])

    @mcp.tool()
    def prompt_search(query: str) -> str:
        """Search prompts by name, description, tags, or content."""
        prompts = storage.load().search(query)
        return json.dumps([_summary(p) for p in prompts])

    @mcp.tool()
    def prompt_delete(key: str) -> str:
        """Delete every prompt whose id or name matches key."""
        bank = storage.load()
        prompt = bank.get(key)
        bank.delete(key)
        storage.save(bank)
        result = {"status": "deleted", "id": prompt.id, "name": prompt.name}
        return json.dumps(result)
