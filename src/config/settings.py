"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use RAZORHOST_ prefix (e.g., RAZORHOST_DESIGN_TIME_MODE=true).

Settings can also be loaded from a .env file in the project root.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use RAZORHOST_ prefix.

    Examples:
        RAZORHOST_BASE_TYPE=MyApp.Views.BasePage
        RAZORHOST_DESIGN_TIME_MODE=true
        RAZORHOST_STRICT_MODE=true
    """

    model_config = SettingsConfigDict(
        env_prefix="RAZORHOST_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Parser configuration
    base_type: str = Field(
        default="Microsoft.AspNet.Mvc.Razor.RazorPage",
        description="Default base class of generated views; @model closes it over the model type",
    )

    design_time_mode: bool = Field(
        default=False,
        description="Leave directive newlines unconsumed so line boundaries stay stable for tooling",
    )

    # Generation configuration
    class_name: str = Field(
        default="GeneratedView",
        description="Name of the generated class",
    )

    root_namespace: str = Field(
        default="Asp",
        description="Namespace of the generated class",
    )

    output_extension: str = Field(
        default=".cs",
        description="File extension of the generated source",
    )

    # Reporting configuration
    strict_mode: bool = Field(
        default=False,
        description="Strict mode: any reported parse error fails the run",
    )

    def outputFile_name(self, class_name: str | None = None) -> str:
        """
        File name for a generated class

        Example:
            >>> AppSettings().outputFile_name("Index")
            'Index.cs'
        """
        return f"{class_name or self.class_name}{self.output_extension}"


# Singleton instance - import this in your code
appsettings = AppSettings()
