"""Laravel and its ecosystem packages.

The ecosystem packages (Livewire, Pest, Pint...) are libraries in the
``TOOL`` priority class. Laravel Boost ships its own curated guidelines
for most of them, so an accepted Boost excludes the overlapping modules.
"""

from __future__ import annotations

from typing import ClassVar, Optional, Tuple

from stackdoc.core.models import (
    DetectionResult,
    ModuleMetadata,
    PriorityClass,
    StackCommands,
)
from stackdoc.core.versions import npm_version_info
from stackdoc.detection.snapshot import ProjectSnapshot
from stackdoc.modules.base import FrameworkModule, LibraryModule, js_package_manager
from stackdoc.modules.scoring import ScoreCard

LARAVEL_DIRS = ("app/Http", "app/Models", "routes", "database/migrations", "resources/views")
LARAVEL_FILES = ("routes/web.php", "routes/api.php", "config/app.php", "app/Http/Kernel.php")


class LaravelModule(FrameworkModule):
    """Laravel.

    Weights: artisan file 0.9, laravel/framework requirement 0.8, each
    standard directory 0.1, each standard file 0.15, more than five PHP
    files under config/ 0.2, a .env file with APP_NAME or APP_KEY 0.1.
    """

    id = "laravel"
    priority_class = PriorityClass.META_FRAMEWORK
    composer_package = "laravel/framework"
    metadata = ModuleMetadata(
        display_name="Laravel",
        description="PHP web application framework",
        supported_versions=("10.x", "11.x", "12.x"),
        keywords=("php", "framework", "mvc", "eloquent", "artisan"),
        homepage="https://laravel.com",
    )

    def probe(self, snapshot: ProjectSnapshot) -> DetectionResult:
        card = ScoreCard()
        card.add_if(snapshot.has_config("artisan"), 0.9, "artisan command file")
        card.add_if(
            snapshot.has_composer("laravel/framework"), 0.8, "laravel/framework in composer.json"
        )
        if not card.evidence:
            return card.result()
        for directory in LARAVEL_DIRS:
            card.add_if(snapshot.has_dir(directory), 0.1, f"Laravel directory: {directory}")
        card.add_each(
            [path for path in LARAVEL_FILES if snapshot.has_file(path)], 0.15, "Laravel file"
        )
        config_count = len(snapshot.files_under("config", ".php"))
        card.add_if(config_count > 5, 0.2, f"Laravel config files: {config_count}")
        if snapshot.has_config(".env"):
            env = snapshot.read_text(".env") or ""
            card.add_if(
                "APP_NAME=" in env or "APP_KEY=" in env, 0.1, ".env with Laravel variables"
            )
        return card.result(self.excludes)

    def commands(self, snapshot: ProjectSnapshot) -> StackCommands:
        commands = StackCommands(
            dev=["php artisan serve", "php artisan tinker"],
            test=["php artisan test"],
            lint=["./vendor/bin/pint"],
            install=["composer install"],
        )
        if snapshot.has_any_config("vite.config.js", "vite.config.ts"):
            pm = js_package_manager(snapshot)
            commands.dev.append(f"{pm} run dev")
            commands.build.append(f"{pm} run build")
        if snapshot.has_any_config("phpstan.neon", "phpstan.neon.dist"):
            commands.lint.append("vendor/bin/phpstan analyse")
        if snapshot.package_json is not None:
            commands.install.append(f"{js_package_manager(snapshot)} install")
        return commands


class LaravelBoostModule(LibraryModule):
    """Laravel Boost.

    Weights: laravel/boost requirement 0.9, boost.json 0.8, config/boost.php
    0.8, Laravel itself 0.1. Without Laravel the confidence is halved.
    """

    id = "laravel-boost"
    priority_class = PriorityClass.META_FRAMEWORK
    composer_package = "laravel/boost"
    excludes = frozenset({
        "laravel",
        "tailwind",
        "livewire",
        "pest",
        "pint",
        "volt",
        "folio",
        "pennant",
        "flux-free",
        "flux-pro",
    })
    metadata = ModuleMetadata(
        display_name="Laravel Boost",
        description="Curated AI guidelines for Laravel and its first-party packages",
        supported_versions=("1.x",),
        keywords=("laravel", "ai", "mcp"),
        homepage="https://github.com/laravel/boost",
    )

    def probe(self, snapshot: ProjectSnapshot) -> DetectionResult:
        card = ScoreCard()
        card.add_if(snapshot.has_composer("laravel/boost"), 0.9, "laravel/boost in composer.json")
        card.add_if(snapshot.has_config("boost.json"), 0.8, "boost.json configuration")
        card.add_if(snapshot.has_file("config/boost.php"), 0.8, "config/boost.php")
        if not card.evidence:
            return card.result()
        has_laravel = snapshot.has_composer("laravel/framework")
        if has_laravel:
            card.add(0.1, "Laravel framework present")
        else:
            card.scale(0.5, "Laravel Boost requires Laravel")
        return card.result(self.excludes)

    def commands(self, snapshot: ProjectSnapshot) -> StackCommands:
        return StackCommands(install=["php artisan boost:install"])


class LaravelToolModule(LibraryModule):
    """A first-party or ecosystem package with a single composer signal.

    Subclasses set ``composer_package`` (weight 0.9) and optionally
    ``marker_dirs``
    and ``marker_files`` (weight 0.2 each, counted only with the package).
    """

    priority_class = PriorityClass.TOOL
    guideline_file = "laravel-tool.md"

    marker_dirs: ClassVar[Tuple[str, ...]] = ()
    marker_files: ClassVar[Tuple[str, ...]] = ()

    def probe(self, snapshot: ProjectSnapshot) -> DetectionResult:
        card = ScoreCard()
        package = self.composer_package
        card.add_if(snapshot.has_composer(package), 0.9, f"{package} in composer.json")
        if not card.evidence:
            return card.result()
        for directory in self.marker_dirs:
            card.add_if(snapshot.has_dir(directory), 0.2, f"directory: {directory}")
        for path in self.marker_files:
            card.add_if(snapshot.has_file(path), 0.2, f"file: {path}")
        return card.result(self.excludes)


class LivewireModule(LaravelToolModule):
    id = "livewire"
    composer_package = "livewire/livewire"
    marker_dirs = ("app/Livewire", "app/Http/Livewire", "resources/views/livewire")
    metadata = ModuleMetadata(
        display_name="Livewire",
        description="Full-stack components for Laravel without writing JavaScript",
        supported_versions=("2.x", "3.x"),
        keywords=("laravel", "components", "reactive"),
        homepage="https://livewire.laravel.com",
    )


class VoltModule(LaravelToolModule):
    id = "volt"
    composer_package = "livewire/volt"
    marker_dirs = ("resources/views/livewire", "resources/views/pages")
    metadata = ModuleMetadata(
        display_name="Livewire Volt",
        description="Single-file functional API for Livewire components",
        supported_versions=("1.x",),
        keywords=("laravel", "livewire", "single-file"),
        homepage="https://livewire.laravel.com/docs/volt",
    )


class FluxFreeModule(LaravelToolModule):
    id = "flux-free"
    composer_package = "livewire/flux"
    metadata = ModuleMetadata(
        display_name="Flux UI Free",
        description="Livewire UI component library",
        supported_versions=("1.x", "2.x"),
        keywords=("laravel", "livewire", "ui"),
        homepage="https://fluxui.dev",
    )


class FluxProModule(LaravelToolModule):
    """Flux UI Pro contains everything in the free edition."""

    id = "flux-pro"
    composer_package = "livewire/flux-pro"
    excludes = frozenset({"flux-free"})
    metadata = ModuleMetadata(
        display_name="Flux UI Pro",
        description="Commercial edition of the Flux UI component library",
        supported_versions=("1.x", "2.x"),
        keywords=("laravel", "livewire", "ui"),
        homepage="https://fluxui.dev/pricing",
    )


class FolioModule(LaravelToolModule):
    id = "folio"
    composer_package = "laravel/folio"
    marker_dirs = ("resources/views/pages",)
    metadata = ModuleMetadata(
        display_name="Laravel Folio",
        description="Page-based routing for Laravel",
        supported_versions=("1.x",),
        keywords=("laravel", "routing", "pages"),
        homepage="https://laravel.com/docs/folio",
    )


class PennantModule(LaravelToolModule):
    id = "pennant"
    composer_package = "laravel/pennant"
    marker_dirs = ("app/Features",)
    metadata = ModuleMetadata(
        display_name="Laravel Pennant",
        description="Feature flags for Laravel",
        supported_versions=("1.x",),
        keywords=("laravel", "feature-flags"),
        homepage="https://laravel.com/docs/pennant",
    )


class PestModule(LaravelToolModule):
    """Pest runs on top of PHPUnit and replaces its guidelines."""

    id = "pest"
    composer_package = "pestphp/pest"
    marker_files = ("tests/Pest.php",)
    excludes = frozenset({"phpunit"})
    metadata = ModuleMetadata(
        display_name="Pest",
        description="Testing framework for PHP focused on simplicity",
        supported_versions=("2.x", "3.x"),
        keywords=("php", "testing"),
        homepage="https://pestphp.com",
    )

    def commands(self, snapshot: ProjectSnapshot) -> StackCommands:
        return StackCommands(test=["./vendor/bin/pest", "./vendor/bin/pest --parallel"])


class PHPUnitModule(LaravelToolModule):
    id = "phpunit"
    composer_package = "phpunit/phpunit"
    marker_files = ("phpunit.xml", "phpunit.xml.dist")
    metadata = ModuleMetadata(
        display_name="PHPUnit",
        description="Unit testing framework for PHP",
        supported_versions=("10.x", "11.x"),
        keywords=("php", "testing"),
        homepage="https://phpunit.de",
    )

    def commands(self, snapshot: ProjectSnapshot) -> StackCommands:
        return StackCommands(test=["./vendor/bin/phpunit"])


class PintModule(LaravelToolModule):
    id = "pint"
    composer_package = "laravel/pint"
    marker_files = ("pint.json",)
    metadata = ModuleMetadata(
        display_name="Laravel Pint",
        description="Opinionated PHP code style fixer",
        supported_versions=("1.x",),
        keywords=("php", "code-style", "linting"),
        homepage="https://laravel.com/docs/pint",
    )

    def commands(self, snapshot: ProjectSnapshot) -> StackCommands:
        return StackCommands(lint=["./vendor/bin/pint", "./vendor/bin/pint --test"])


class InertiaModule(LibraryModule):
    """Inertia.js.

    Inertia provides its own conventions for the client-side framework it
    adapts, so the React, Vue or Svelte module matching the installed
    adapter is excluded.

    Weights: inertiajs/inertia-laravel 0.8, a client adapter 0.8,
    resources/js/Pages or resources/ts/Pages 0.2.
    """

    id = "inertia"
    priority_class = PriorityClass.TOOL
    guideline_file = "laravel-tool.md"
    composer_package = "inertiajs/inertia-laravel"
    metadata = ModuleMetadata(
        display_name="Inertia.js",
        description="Server-driven single-page apps with classic routing",
        supported_versions=("1.x", "2.x"),
        keywords=("laravel", "spa", "react", "vue", "svelte"),
        homepage="https://inertiajs.com",
    )

    ADAPTERS = (
        ("@inertiajs/react", "react"),
        ("@inertiajs/vue3", "vue"),
        ("@inertiajs/vue2", "vue"),
        ("@inertiajs/svelte", "svelte"),
    )
    PAGE_DIRS = ("resources/js/Pages", "resources/js/pages", "resources/ts/Pages", "resources/ts/pages")

    def probe(self, snapshot: ProjectSnapshot) -> DetectionResult:
        card = ScoreCard()
        card.add_if(
            snapshot.has_composer("inertiajs/inertia-laravel"), 0.8, "inertiajs/inertia-laravel"
        )
        excludes = set()
        adapter_found = False
        for package, module_id in self.ADAPTERS:
            if snapshot.has_npm(package):
                excludes.add(module_id)
                if not adapter_found:
                    card.add(0.8, f"Inertia adapter: {package}")
                    adapter_found = True
        if not card.evidence:
            return card.result()
        card.add_if(
            any(snapshot.has_dir(directory) for directory in self.PAGE_DIRS), 0.2, "Inertia pages"
        )
        return card.result(excludes)

    def resolve_version(self, snapshot: ProjectSnapshot) -> Optional[str]:
        version = super().resolve_version(snapshot)
        if version is not None:
            return version
        # Client adapters follow the server adapter's major version.
        for package, _ in self.ADAPTERS:
            info = npm_version_info(snapshot, package)
            if info is not None:
                return str(info.major)
        return None
