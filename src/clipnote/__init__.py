"""clipnote: YouTube video -> markdown note via interchangeable AI providers.

Entry points (independent):
- clipnote.llm: providers, fallback orchestration, typed results
- clipnote.prompts: prompt templates and front-matter repair
- clipnote.youtube: video title/description retrieval
- clipnote.pipeline: end-to-end processing
"""

__version__ = "0.1.0"
