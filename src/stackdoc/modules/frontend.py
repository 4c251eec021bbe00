"""JavaScript frameworks and meta-frameworks.

Directory and file-layout signals only count once a package or config
file signal has been found, so a bare `pages/` or `app/` directory never
makes a framework accepted on its own.
"""

from __future__ import annotations

from stackdoc.core.models import (
    DetectionResult,
    ModuleMetadata,
    PriorityClass,
    StackCommands,
)
from stackdoc.detection.snapshot import ProjectSnapshot
from stackdoc.modules.base import FrameworkModule, js_package_manager
from stackdoc.modules.scoring import ScoreCard

STATE_LIBRARIES = ("redux", "@reduxjs/toolkit", "zustand", "mobx", "recoil", "jotai")


def _standard_js_commands(snapshot: ProjectSnapshot, dev_scripts=("dev",)) -> StackCommands:
    pm = js_package_manager(snapshot)
    commands = StackCommands(
        dev=[f"{pm} run {script}" for script in dev_scripts],
        build=[f"{pm} run build"],
        test=[f"{pm} run test"],
        lint=[f"{pm} run lint"],
        install=[f"{pm} install"],
    )
    if snapshot.has_any_config("vitest.config.js", "vitest.config.ts", "vitest.config.mjs"):
        commands.test.append(f"{pm} run test:vitest")
    return commands


def _config_files(snapshot: ProjectSnapshot, stem: str) -> list:
    return sorted(name for name in snapshot.config_files if name.startswith(f"{stem}.config."))


class ReactModule(FrameworkModule):
    """React.

    Weights: react dependency 0.9, react-dom 0.8, react-scripts 0.7,
    @vitejs/plugin-react 0.7, JSX/TSX files 0.05 each up to 0.3,
    react-router-dom 0.2, a state library 0.1, src/components, src/pages
    and src/hooks 0.1 each, public/index.html 0.1.
    """

    id = "react"
    priority_class = PriorityClass.FRAMEWORK
    npm_package = "react"
    metadata = ModuleMetadata(
        display_name="React",
        description="React component library for building user interfaces",
        supported_versions=("17.x", "18.x", "19.x"),
        keywords=("javascript", "frontend", "spa", "jsx"),
        homepage="https://react.dev",
    )

    def probe(self, snapshot: ProjectSnapshot) -> DetectionResult:
        card = ScoreCard()
        card.add_if("react" in snapshot.dependencies, 0.9, "react in dependencies")
        card.add_if("react" in snapshot.dev_dependencies, 0.9, "react in devDependencies")
        card.add_if(snapshot.has_npm("react-dom"), 0.8, "react-dom dependency")
        card.add_if(snapshot.has_npm("react-scripts"), 0.7, "Create React App (react-scripts)")
        card.add_if(snapshot.has_npm("@vitejs/plugin-react"), 0.7, "Vite React plugin")
        if not card.evidence:
            return card.result()
        card.add_count(len(snapshot.files_with_suffix(".jsx", ".tsx")), 0.05, 0.3, "JSX/TSX files")
        card.add_if(snapshot.has_npm("react-router-dom"), 0.2, "react-router-dom dependency")
        card.add_if(
            any(snapshot.has_npm(lib) for lib in STATE_LIBRARIES), 0.1, "state management library"
        )
        for directory in ("src/components", "src/pages", "src/hooks"):
            card.add_if(snapshot.has_dir(directory), 0.1, f"React directory: {directory}")
        card.add_if(snapshot.has_file("public/index.html"), 0.1, "public/index.html")
        return card.result(self.excludes)

    def commands(self, snapshot: ProjectSnapshot) -> StackCommands:
        pm = js_package_manager(snapshot)
        commands = _standard_js_commands(snapshot, dev_scripts=("dev", "start"))
        commands.lint.append(f"{pm} run lint:fix")
        if snapshot.has_npm("react-scripts"):
            commands.test.append(f"{pm} run test -- --coverage")
        return commands


class NextModule(FrameworkModule):
    """Next.js. Bundles React, so an accepted Next.js excludes ``react``.

    Weights: next dependency 0.9, next.config.* 0.8 each, pages/, app/
    and public/ directories 0.3 each, _app/_document/layout/page entry
    files 0.2 each, next in dev/build/start scripts 0.3.
    """

    id = "next"
    priority_class = PriorityClass.META_FRAMEWORK
    npm_package = "next"
    excludes = frozenset({"react"})
    metadata = ModuleMetadata(
        display_name="Next.js",
        description="React meta-framework with file-based routing and server rendering",
        supported_versions=("13.x", "14.x", "15.x"),
        keywords=("react", "ssr", "fullstack"),
        homepage="https://nextjs.org",
    )

    ENTRY_FILES = (
        "pages/_app.js",
        "pages/_app.tsx",
        "pages/_document.js",
        "pages/_document.tsx",
        "app/layout.js",
        "app/layout.tsx",
        "app/page.js",
        "app/page.tsx",
    )

    def probe(self, snapshot: ProjectSnapshot) -> DetectionResult:
        card = ScoreCard()
        card.add_if("next" in snapshot.dependencies, 0.9, "next in dependencies")
        card.add_if("next" in snapshot.dev_dependencies, 0.9, "next in devDependencies")
        card.add_each(_config_files(snapshot, "next"), 0.8, "Next.js config file")
        if not card.evidence:
            return card.result()
        for directory in ("pages", "app", "public"):
            card.add_if(snapshot.has_dir(directory), 0.3, f"Next.js directory: {directory}")
        card.add_each(
            [path for path in self.ENTRY_FILES if snapshot.has_file(path)], 0.2, "Next.js file"
        )
        scripts = snapshot.scripts
        card.add_if(
            any("next" in str(scripts.get(name, "")) for name in ("dev", "build", "start")),
            0.3,
            "next in package.json scripts",
        )
        return card.result(self.excludes)

    def commands(self, snapshot: ProjectSnapshot) -> StackCommands:
        pm = js_package_manager(snapshot)
        commands = _standard_js_commands(snapshot)
        commands.dev.append(f"{pm} run start")
        return commands


class NuxtModule(FrameworkModule):
    """Nuxt. Bundles Vue, so an accepted Nuxt excludes ``vue``.

    Weights: nuxt dependency 0.9, nuxt.config.* 0.8, pages/, layouts/,
    components/ and composables/ 0.1 each, app.vue 0.2.
    """

    id = "nuxt"
    priority_class = PriorityClass.META_FRAMEWORK
    npm_package = "nuxt"
    excludes = frozenset({"vue"})
    metadata = ModuleMetadata(
        display_name="Nuxt.js",
        description="Vue meta-framework with server rendering and file-based routing",
        supported_versions=("3.x",),
        keywords=("vue", "ssr", "fullstack"),
        homepage="https://nuxt.com",
    )

    def probe(self, snapshot: ProjectSnapshot) -> DetectionResult:
        card = ScoreCard()
        card.add_if(snapshot.has_npm("nuxt"), 0.9, "nuxt dependency")
        card.add_if(_config_files(snapshot, "nuxt"), 0.8, "Nuxt config file")
        if not card.evidence:
            return card.result()
        for directory in ("pages", "layouts", "components", "composables"):
            card.add_if(snapshot.has_dir(directory), 0.1, f"Nuxt directory: {directory}")
        card.add_if(snapshot.has_file("app.vue"), 0.2, "app.vue entry")
        return card.result(self.excludes)

    def commands(self, snapshot: ProjectSnapshot) -> StackCommands:
        pm = js_package_manager(snapshot)
        commands = _standard_js_commands(snapshot)
        commands.build.append(f"{pm} run generate")
        commands.dev.append(f"{pm} run preview")
        return commands


class SvelteKitModule(FrameworkModule):
    """SvelteKit. Bundles Svelte, so an accepted SvelteKit excludes ``svelte``.

    Weights: @sveltejs/kit dependency 0.9, svelte.config.* 0.3,
    src/routes/ 0.2, +page.svelte files 0.2.
    """

    id = "sveltekit"
    priority_class = PriorityClass.META_FRAMEWORK
    npm_package = "@sveltejs/kit"
    excludes = frozenset({"svelte"})
    metadata = ModuleMetadata(
        display_name="SvelteKit",
        description="Svelte application framework with routing and server rendering",
        supported_versions=("1.x", "2.x"),
        keywords=("svelte", "ssr", "fullstack"),
        homepage="https://svelte.dev/docs/kit",
    )

    def probe(self, snapshot: ProjectSnapshot) -> DetectionResult:
        card = ScoreCard()
        card.add_if(snapshot.has_npm("@sveltejs/kit"), 0.9, "@sveltejs/kit dependency")
        if not card.evidence:
            return card.result()
        card.add_if(_config_files(snapshot, "svelte"), 0.3, "Svelte config file")
        card.add_if(snapshot.has_dir("src/routes"), 0.2, "src/routes directory")
        card.add_if(
            any(path.endswith("+page.svelte") for path in snapshot.files), 0.2, "+page.svelte routes"
        )
        return card.result(self.excludes)

    def commands(self, snapshot: ProjectSnapshot) -> StackCommands:
        pm = js_package_manager(snapshot)
        commands = _standard_js_commands(snapshot)
        commands.lint.append(f"{pm} run check")
        return commands


class AstroModule(FrameworkModule):
    """Astro.

    Weights: astro dependency 0.9, astro.config.* 0.8, .astro files 0.05
    each up to 0.3, src/pages/ 0.1.
    """

    id = "astro"
    priority_class = PriorityClass.META_FRAMEWORK
    npm_package = "astro"
    metadata = ModuleMetadata(
        display_name="Astro",
        description="Content-focused web framework with island architecture",
        supported_versions=("3.x", "4.x", "5.x"),
        keywords=("static", "islands", "content"),
        homepage="https://astro.build",
    )

    def probe(self, snapshot: ProjectSnapshot) -> DetectionResult:
        card = ScoreCard()
        card.add_if(snapshot.has_npm("astro"), 0.9, "astro dependency")
        card.add_if(_config_files(snapshot, "astro"), 0.8, "Astro config file")
        if not card.evidence:
            return card.result()
        card.add_count(len(snapshot.files_with_suffix(".astro")), 0.05, 0.3, "Astro files")
        card.add_if(snapshot.has_dir("src/pages"), 0.1, "src/pages directory")
        return card.result(self.excludes)

    def commands(self, snapshot: ProjectSnapshot) -> StackCommands:
        pm = js_package_manager(snapshot)
        commands = _standard_js_commands(snapshot)
        commands.dev.append(f"{pm} run preview")
        commands.lint.append(f"{pm} run astro check")
        return commands


class VueModule(FrameworkModule):
    """Vue.js.

    Weights: vue dependency 0.9, @vitejs/plugin-vue 0.5, vue.config.js
    0.3, .vue files 0.05 each up to 0.3, vue-router, pinia or vuex 0.1.
    """

    id = "vue"
    priority_class = PriorityClass.FRAMEWORK
    npm_package = "vue"
    metadata = ModuleMetadata(
        display_name="Vue.js",
        description="Progressive framework for building user interfaces",
        supported_versions=("2.x", "3.x"),
        keywords=("javascript", "frontend", "sfc"),
        homepage="https://vuejs.org",
    )

    def probe(self, snapshot: ProjectSnapshot) -> DetectionResult:
        card = ScoreCard()
        card.add_if(snapshot.has_npm("vue"), 0.9, "vue dependency")
        card.add_if(snapshot.has_npm("@vitejs/plugin-vue"), 0.5, "Vite Vue plugin")
        card.add_if(snapshot.has_config("vue.config.js"), 0.3, "vue.config.js")
        card.add_count(len(snapshot.files_with_suffix(".vue")), 0.05, 0.3, "Vue single-file components")
        card.add_if(
            any(snapshot.has_npm(lib) for lib in ("vue-router", "pinia", "vuex")),
            0.1,
            "Vue ecosystem library",
        )
        return card.result(self.excludes)

    def commands(self, snapshot: ProjectSnapshot) -> StackCommands:
        return _standard_js_commands(snapshot)


class SvelteModule(FrameworkModule):
    """Svelte.

    Weights: svelte dependency 0.9, @sveltejs/vite-plugin-svelte 0.5,
    .svelte files 0.05 each up to 0.3.
    """

    id = "svelte"
    priority_class = PriorityClass.FRAMEWORK
    npm_package = "svelte"
    metadata = ModuleMetadata(
        display_name="Svelte",
        description="Compiler-based UI framework",
        supported_versions=("4.x", "5.x"),
        keywords=("javascript", "frontend", "compiler"),
        homepage="https://svelte.dev",
    )

    def probe(self, snapshot: ProjectSnapshot) -> DetectionResult:
        card = ScoreCard()
        card.add_if(snapshot.has_npm("svelte"), 0.9, "svelte dependency")
        card.add_if(snapshot.has_npm("@sveltejs/vite-plugin-svelte"), 0.5, "Vite Svelte plugin")
        card.add_count(len(snapshot.files_with_suffix(".svelte")), 0.05, 0.3, "Svelte components")
        return card.result(self.excludes)

    def commands(self, snapshot: ProjectSnapshot) -> StackCommands:
        return _standard_js_commands(snapshot)


class SolidModule(FrameworkModule):
    """Solid.js.

    Weights: solid-js dependency 0.9, vite-plugin-solid 0.5,
    @solidjs/start 0.3.
    """

    id = "solid"
    priority_class = PriorityClass.FRAMEWORK
    npm_package = "solid-js"
    metadata = ModuleMetadata(
        display_name="Solid.js",
        description="Reactive UI library with fine-grained reactivity",
        supported_versions=("1.x",),
        keywords=("javascript", "frontend", "signals"),
        homepage="https://www.solidjs.com",
    )

    def probe(self, snapshot: ProjectSnapshot) -> DetectionResult:
        card = ScoreCard()
        card.add_if(snapshot.has_npm("solid-js"), 0.9, "solid-js dependency")
        card.add_if(snapshot.has_npm("vite-plugin-solid"), 0.5, "Vite Solid plugin")
        card.add_if(snapshot.has_npm("@solidjs/start"), 0.3, "SolidStart dependency")
        return card.result(self.excludes)

    def commands(self, snapshot: ProjectSnapshot) -> StackCommands:
        return _standard_js_commands(snapshot)
