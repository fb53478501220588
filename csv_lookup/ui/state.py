import streamlit as st
from typing import Any, Dict, List

from csv_lookup.core.config_loader import load_config
from csv_lookup.core.lookup_service import LookupService
from csv_lookup.core.options import SearchOptions


class AppState:
    def __init__(self):
        # Config is loaded once per session; a browser refresh reloads it
        if "app_config" not in st.session_state:
            st.session_state.app_config = load_config()

        self.config = st.session_state.app_config

    @property
    def env(self) -> str:
        return self.config.get("env", "UNKNOWN")

    @property
    def config_status(self) -> str:
        return self.config.get("status", "UNKNOWN")

    @property
    def data(self) -> Dict[str, Any]:
        if self.config_status != "OK":
            return {}
        return self.config.get("data", {})

    @property
    def search_options(self) -> SearchOptions:
        return SearchOptions.from_config(self.data.get("search", {}))

    @property
    def extensions(self) -> List[str]:
        return list(self.data.get("search", {}).get("extensions") or [".csv"])

    def lookup_service(self, options: SearchOptions = None) -> LookupService:
        return LookupService(options or self.search_options, self.extensions)


def init_app_state() -> AppState:
    return AppState()
