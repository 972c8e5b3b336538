from dataclasses import dataclass

from testbuild.console import fail

PLATFORM_GROUPS = {
    "windows": "WindowsDesktop",
    "android": "Android",
}


@dataclass(frozen=True)
class BuildTarget:
    platform: str
    architecture: str
    folder: str
    binary_suffix: str
    binary_prefix: str = ""

    @property
    def is_android(self):
        return self.platform == "Android"

    def binary_name(self, assembly_name):
        return f"{self.binary_prefix}{assembly_name}{self.binary_suffix}"


# Build order matters: desktop first, then mobile
TARGETS = [
    BuildTarget("WindowsDesktop", "x86", "win-x86", ".dll"),
    BuildTarget("WindowsDesktop", "x64", "win-x64", ".dll"),
    BuildTarget("Android", "ARMv7", "android-armeabi-v7a", ".so", "lib"),
    BuildTarget("Android", "ARM64", "android-arm64-v8a", ".so", "lib"),
]


def select_targets(platform="all", architectures=None):
    """Filter TARGETS by platform group and architecture names"""
    selected = list(TARGETS)

    if platform != "all":
        if platform not in PLATFORM_GROUPS:
            fail(f"Unknown platform: {platform}")
        selected = [t for t in selected if t.platform == PLATFORM_GROUPS[platform]]

    if architectures:
        wanted = {a.lower() for a in architectures}
        known = {t.architecture.lower() for t in TARGETS}
        unknown = sorted(wanted - known)
        if unknown:
            fail(f"Unknown architecture: {', '.join(unknown)}",
                 hint=f"Choose from: {', '.join(t.architecture for t in TARGETS)}")
        selected = [t for t in selected if t.architecture.lower() in wanted]

    if not selected:
        fail(f"No build targets match platform '{platform}' and architectures {architectures}")

    return selected
