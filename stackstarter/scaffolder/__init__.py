"""stackstarter scaffolder -- the stages that build a project on disk.

Stages write the Express backend skeleton, drive ``npm``/``create-vite``/
``tailwindcss`` through a ``CommandRunner``, and lay down the static
configuration templates.

Quick usage::

    from stackstarter.config import Config
    from stackstarter.scaffolder import StageContext, scaffold_backend, create_project_root

    ctx = StageContext(config=Config(project_name="my-app"), runner=runner)
    await create_project_root(ctx)
    await scaffold_backend(ctx)
"""

from stackstarter.scaffolder.stages import (
    PIPELINE_STAGES,
    StageContext,
    StageError,
    StageResult,
    create_project_root,
    init_backend,
    init_frontend,
    install_backend_dependencies,
    install_frontend_dependencies,
    patch_vite_proxy,
    scaffold_backend,
    setup_styling,
    write_readme,
    write_styling_config,
)
from stackstarter.scaffolder.templates import TemplateRenderer

__all__ = [
    "PIPELINE_STAGES",
    "StageContext",
    "StageError",
    "StageResult",
    "TemplateRenderer",
    "create_project_root",
    "init_backend",
    "init_frontend",
    "install_backend_dependencies",
    "install_frontend_dependencies",
    "patch_vite_proxy",
    "scaffold_backend",
    "setup_styling",
    "write_readme",
    "write_styling_config",
]
