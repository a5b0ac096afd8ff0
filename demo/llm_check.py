from config import load_config, load_env_file
from draws.service import build_result
from llm.gemini_provider import generate_content, list_models
from llm.provider import LLMError


def main() -> int:
    load_env_file(".env", override=True)
    config = load_config()
    try:
        models = list_models(config)
    except LLMError as exc:
        reason = str(exc)
        if reason == "missing_llm_key":
            print("LLM DISABLED (missing_key)")
            return 0
        print(f"LLM ERROR ({reason})")
        return 1

    print(f"Models found: {len(models)}")
    print(f"Selected model: {config.model}")
    if config.model not in models:
        print("LLM ERROR (model_not_available)")
        print("Available models:", ", ".join(models[:10]))
        return 1

    try:
        response = generate_content('Return exactly this JSON object: {"draws": []}', config=config)
    except LLMError as exc:
        print(f"LLM ERROR ({exc})")
        return 1

    result = build_result(response.text)
    if result.error_detail:
        print(f"LLM ERROR (invalid_llm_output: {result.error_detail})")
        return 1

    print(f"LLM OK (gemini, model={config.model})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
