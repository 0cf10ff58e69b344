"""Built-in renderers shipped with spectype.

=================  ==========================================================
Name               Output
=================  ==========================================================
``types``          Type declarations only.
``fetch``          One typed ``async`` function per operation, on ``fetch``.
``axios``          One typed function per operation, on a shared axios
                   instance.
``axios-client``   A ``createApi(client)`` factory returning an object of
                   typed calls, named from the route (``getPetsByPetId``).
``swr``            One ``use<Name>`` data-fetching hook per ``GET`` operation;
                   a ``prefer`` header switches the hook to polling.
=================  ==========================================================

All built-ins emit TypeScript and expect routes interpolated with the
default ``${name}`` placeholder.
"""

from __future__ import annotations

import re
from typing import Optional, Sequence

from spectype.models import ComponentDescriptor, HTTPMethod
from spectype.naming import camel_case, default_operation_name, lower_first
from spectype.render.base import Renderer, trailing_id
from spectype.render.typescript import doc_comment, path_params_signature, print_type

_FETCH_PREAMBLE = """\
export const baseUrl = { current: "" };

async function request<T>(path: string, init: RequestInit, params?: object): Promise<T> {
  const search = new URLSearchParams();
  for (const [key, value] of Object.entries(params ?? {})) {
    if (value !== undefined && value !== null) search.append(key, String(value));
  }
  const query = search.toString();
  const response = await fetch(`${baseUrl.current}${path}${query ? `?${query}` : ""}`, init);
  if (!response.ok) throw await response.json().catch(() => response.statusText);
  return response.status === 204 ? (undefined as T) : ((await response.json()) as T);
}"""

_API_PREFIX = re.compile(r"^/(?:api/)?(?:v\d+/)?")


def _arguments(*parts: str) -> str:
    return ", ".join(p for p in parts if p)


def _with_doc(component: ComponentDescriptor, text: str, indent: str = "") -> str:
    comment = doc_comment(component.doc, indent)
    return f"{comment}\n{text}" if comment else text


def _route_literal(component: ComponentDescriptor) -> tuple[str, str]:
    """Return ``(template literal, id argument)`` for *component*'s route."""
    id_name = trailing_id(component)
    if id_name is None:
        return f"`{component.route}`", ""
    route = component.route.rstrip("/")
    return f"`{route}/${{{id_name}}}`", f"{id_name}: string"


class TypesRenderer(Renderer):
    """Emit the named type declarations and nothing else."""

    @property
    def name(self) -> str:
        return "types"

    @property
    def description(self) -> str:
        return "Type declarations only"

    def render(self, component: ComponentDescriptor) -> str:
        return ""


class FetchRenderer(Renderer):
    """Typed functions over the Fetch API."""

    @property
    def name(self) -> str:
        return "fetch"

    @property
    def description(self) -> str:
        return "Typed async functions using fetch"

    def preamble(self) -> str:
        return _FETCH_PREAMBLE

    def render(self, component: ComponentDescriptor) -> str:
        route, id_arg = _route_literal(component)
        response = print_type(component.response_type)
        method = component.verb.value.upper()
        path_args = path_params_signature(component.path_params)

        if component.verb in (HTTPMethod.GET, HTTPMethod.DELETE):
            query = (
                f"params?: {print_type(component.query_type)}"
                if component.query_params_type is not None
                else ""
            )
            signature = _arguments(path_args, id_arg, query, "init?: RequestInit")
            call = f'request<{response}>({route}, {{ ...init, method: "{method}" }}'
            call += ", params)" if query else ")"
        else:
            body = f"body: {print_type(component.body_type)}"
            signature = _arguments(path_args, id_arg, body, "init?: RequestInit")
            call = (
                f"request<{response}>({route}, {{\n"
                f"    ...init,\n"
                f'    method: "{method}",\n'
                f"    body: JSON.stringify(body),\n"
                f'    headers: {{ "Content-Type": "application/json", ...init?.headers }},\n'
                f"  }})"
            )

        text = (
            f"export const {lower_first(component.name)} = ({signature}): Promise<{response}> =>\n"
            f"  {call};"
        )
        return _with_doc(component, text)


class AxiosRenderer(Renderer):
    """Typed functions on a shared ``clientInstance`` axios instance."""

    client = "clientInstance"

    @property
    def name(self) -> str:
        return "axios"

    @property
    def description(self) -> str:
        return "Typed functions using an axios instance"

    def preamble(self) -> str:
        return (
            'import axios, { AxiosRequestConfig } from "axios";\n\n'
            "export const clientInstance = axios.create();"
        )

    def signature_and_call(self, component: ComponentDescriptor) -> tuple[str, str]:
        """Return the argument list and the axios call expression."""
        route, id_arg = _route_literal(component)
        response = print_type(component.response_type)
        path_args = path_params_signature(component.path_params)
        verb = component.verb.value

        if component.verb is HTTPMethod.GET:
            signature = _arguments(
                path_args,
                f"params?: {print_type(component.query_type)}",
                "config?: AxiosRequestConfig",
            )
            call = f"{self.client}.get<{response}>({route}, {{ ...config, params }})"
        elif component.verb is HTTPMethod.DELETE:
            signature = _arguments(path_args, id_arg, "config?: AxiosRequestConfig")
            call = f"{self.client}.delete<{response}>({route}, config)"
        else:
            signature = _arguments(
                path_args,
                f"body: {print_type(component.body_type)}",
                "config?: AxiosRequestConfig",
            )
            call = f"{self.client}.{verb}<{response}>({route}, body, config)"
        return signature, call

    def render(self, component: ComponentDescriptor) -> str:
        signature, call = self.signature_and_call(component)
        text = f"export const {lower_first(component.name)} = ({signature}) =>\n  {call};"
        return _with_doc(component, text)


class AxiosClientRenderer(AxiosRenderer):
    """A ``createApi(client)`` factory wrapping every operation.

    Operations without ``operationId`` are named from the route, ignoring an
    ``/api`` and version prefix: ``GET /api/v1/pets/{id}`` -> ``getPetsById``.
    """

    client = "client"

    @property
    def name(self) -> str:
        return "axios-client"

    @property
    def description(self) -> str:
        return "createApi(client) factory over an axios instance"

    def preamble(self) -> str:
        return 'import { AxiosInstance, AxiosRequestConfig } from "axios";'

    def name_operation(self, verb: str, route: str) -> Optional[str]:
        return camel_case(default_operation_name(verb, _API_PREFIX.sub("/", route)))

    def render(self, component: ComponentDescriptor) -> str:
        signature, call = self.signature_and_call(component)
        text = f"    {lower_first(component.name)}: ({signature}) =>\n      {call},"
        return _with_doc(component, text, indent="    ")

    def render_all(self, components: Sequence[ComponentDescriptor]) -> str:
        members = "\n".join(self.render(component) for component in components)
        return (
            "export function createApi(client: AxiosInstance) {\n"
            "  return {\n"
            f"{members}\n"
            "  };\n"
            "}"
        )


class SwrRenderer(Renderer):
    """``useSWR`` hooks for ``GET`` operations.

    Operations accepting a ``prefer`` header (long polling) get a hook that
    refreshes every :attr:`poll_interval` milliseconds.
    """

    poll_interval = 1000

    @property
    def name(self) -> str:
        return "swr"

    @property
    def description(self) -> str:
        return "useSWR data-fetching hooks for GET operations"

    def preamble(self) -> str:
        return 'import useSWR, { Fetcher, SWRConfiguration } from "swr";'

    def render(self, component: ComponentDescriptor) -> str:
        if component.verb is not HTTPMethod.GET:
            return ""

        route, _ = _route_literal(component)
        response = print_type(component.response_type)
        error = print_type(component.error_type)
        has_query = component.query_params_type is not None

        signature = _arguments(
            path_params_signature(component.path_params),
            f"params?: {print_type(component.query_type)}" if has_query else "",
            "fetcher?: Fetcher<Data>",
            "config?: SWRConfiguration<Data, Error>",
        )
        key = f"params ? [{route}, params] : {route}" if has_query else route
        options = (
            f"{{ refreshInterval: {self.poll_interval}, ...config }}"
            if component.header("prefer") is not None
            else "config"
        )
        text = (
            f"export const use{component.name} = <Data = {response}, Error = {error}>({signature}) =>\n"
            f"  useSWR<Data, Error>({key}, fetcher, {options});"
        )
        return _with_doc(component, text)


BUILTIN_RENDERERS: dict[str, type[Renderer]] = {
    "types": TypesRenderer,
    "fetch": FetchRenderer,
    "axios": AxiosRenderer,
    "axios-client": AxiosClientRenderer,
    "swr": SwrRenderer,
}
"""Renderer classes available without any entry point, keyed by name."""
