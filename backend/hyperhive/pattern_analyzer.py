"""Keyword-dictionary analysis of a developer's commits and pull requests.

Each analysis builds one text corpus from commit messages, pull request text
and changed file names, counts case-insensitive keyword occurrences per
category and keeps a handful of examples. Categories without hits are
dropped; the rest are ordered by count with ties left in dictionary order.
"""

from __future__ import annotations

import re
from collections import OrderedDict
from types import MappingProxyType
from typing import Callable, Dict, Iterable, List, Mapping, Sequence, Tuple

from .github_models import (
    ConceptUsage,
    DeveloperStrongAreas,
    DomainArea,
    GitHubCommit,
    GitHubPullRequest,
    LanguageUsage,
    TechnologyUsage,
)

UNKNOWN_LANGUAGE = "Unknown"
MAX_TECHNOLOGY_FILES = 10
MAX_EXAMPLES = 5

TECHNOLOGY_PATTERNS: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        "ASP.NET Core": ("Startup.cs", "Program.cs", "appsettings.json", "Microsoft.AspNetCore", "UseRouting", "MapControllers"),
        "Entity Framework": ("DbContext", "DbSet", "OnModelCreating", "Migration", "EntityFrameworkCore"),
        "Dapper": ("Dapper", "QueryAsync", "ExecuteAsync", "IDbRepository"),
        "MySQL": ("MySqlConnection", "MySql.Data", "CREATE TABLE", "INSERT INTO"),
        "JWT Authentication": ("JwtBearer", "JwtSecurityToken", "TokenValidationParameters", "GenerateToken"),
        "REST API": ("ApiController", "HttpGet", "HttpPost", "HttpPut", "HttpDelete", "Route"),
        "Swagger": ("SwaggerGen", "SwaggerUI", "OpenApiInfo", "AddSwaggerGen"),
        "Dependency Injection": ("AddScoped", "AddTransient", "AddSingleton", "IServiceCollection"),
        "BCrypt": ("BCrypt", "HashPassword", "VerifyPassword"),
        "Serilog": ("Serilog", "Log.Logger", "WriteTo"),
        "AWS SDK": ("AWSSDK", "Amazon", "S3", "DynamoDB", "Lambda"),
        "MediatR": ("MediatR", "IRequest", "IRequestHandler", "SendAsync"),
        "Docker": ("Dockerfile", "docker-compose", ".dockerignore"),
        "Unit Testing": ("xUnit", "NUnit", "Moq", "Test", "Assert"),
        "GraphQL": ("GraphQL", "Query", "Mutation", "Schema"),
        "gRPC": ("Grpc", "proto", "ServiceDefinition"),
        "Redis": ("Redis", "StackExchange.Redis", "IDatabase"),
        "RabbitMQ": ("RabbitMQ", "IModel", "QueueDeclare"),
        "Kafka": ("Kafka", "Confluent", "Producer", "Consumer"),
        "React": ("React", "useState", "useEffect", "Component", ".jsx"),
        "Angular": ("Angular", "@Component", "@Injectable", ".ts"),
        "Vue.js": ("Vue", "vue", ".vue", "VueComponent"),
        "Node.js": ("Node.js", "express", "require(", "module.exports"),
    }
)

DOMAIN_PATTERNS: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        "Backend API": ("Controllers", "Services", "Repositories", "ApiController"),
        "Database": ("DataAccess", "Repository", "DbContext", "Migration", "SQL"),
        "Authentication": ("Auth", "Login", "Signup", "JWT", "Token", "Password"),
        "Frontend": (".jsx", ".tsx", ".vue", "React", "Angular", "Vue", "Component"),
        "Infrastructure": ("Infrastructure", "Config", "Startup", "Program.cs"),
        "Testing": ("Tests", "Test", "Spec", "Mock", "Fixture"),
        "DevOps": ("Dockerfile", "CI/CD", "pipeline", "deploy", "kubernetes", ".github"),
        "Documentation": ("README", ".md", "docs", "Documentation"),
    }
)

LANGUAGE_EXTENSIONS: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        "C#": (".cs", ".csx"),
        "JavaScript": (".js", ".jsx", ".mjs"),
        "TypeScript": (".ts", ".tsx"),
        "Python": (".py", ".pyw"),
        "Java": (".java",),
        "SQL": (".sql",),
        "HTML": (".html", ".htm"),
        "CSS": (".css", ".scss", ".sass"),
        "JSON": (".json",),
        "XML": (".xml", ".config"),
        "YAML": (".yml", ".yaml"),
        "Shell": (".sh", ".bash", ".ps1"),
        "Docker": ("Dockerfile", ".dockerignore"),
        "Markdown": (".md", ".markdown"),
        "Go": (".go",),
        "Rust": (".rs",),
        "PHP": (".php",),
        "Ruby": (".rb",),
    }
)

CONCEPT_PATTERNS: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        "Async/Await": ("async", "await", "Task", "Task<", "async Task"),
        "LINQ": (".Where(", ".Select(", ".FirstOrDefault(", ".Any(", ".ToList("),
        "Dependency Injection": ("AddScoped", "AddTransient", "AddSingleton", "IServiceProvider"),
        "Repository Pattern": ("IRepository", "Repository", "IDbRepository"),
        "Unit of Work": ("IUnitOfWork", "UnitOfWork", "SaveChanges"),
        "Factory Pattern": ("Factory", "Create", "IFactory"),
        "Strategy Pattern": ("IStrategy", "Strategy", "Execute"),
        "Observer Pattern": ("IObserver", "Subscribe", "Notify"),
        "Middleware": ("UseMiddleware", "IMiddleware", "InvokeAsync"),
        "Attribute Routing": ("[Route(", "[HttpGet(", "[HttpPost("),
        "Model Validation": ("[Required]", "[EmailAddress]", "[StringLength]", "ModelState"),
        "Error Handling": ("try", "catch", "throw", "Exception", "ErrorHandler"),
        "Logging": ("ILogger", "LogInformation", "LogError", "LogWarning"),
        "Configuration": ("IConfiguration", "appsettings", "GetSection", "GetValue"),
        "Caching": ("IMemoryCache", "Cache", "GetOrCreate", "Set"),
    }
)

_FILE_PATH_PATTERNS = (
    re.compile(r"[\w/\\]+\.\w+"),
    re.compile(r"[A-Za-z]:\\[^\s]+"),
    re.compile(r"/[^\s]+"),
)


def detect_language(path: str) -> str:
    """Map a path to a language by extension, or by exact name for markers like Dockerfile."""
    file_name = re.split(r"[\\/]", path)[-1]
    dot = file_name.rfind(".")
    extension = file_name[dot:].lower() if dot >= 0 else ""
    for language, markers in LANGUAGE_EXTENSIONS.items():
        if any(extension == marker or file_name == marker for marker in markers):
            return language
    return UNKNOWN_LANGUAGE


def extract_file_paths(text: str) -> List[str]:
    paths: List[str] = []
    for pattern in _FILE_PATH_PATTERNS:
        for match in pattern.finditer(text):
            if match.group(0) not in paths:
                paths.append(match.group(0))
    return paths


def count_occurrences(corpus: str, keyword: str) -> int:
    """Non-overlapping, case-insensitive literal occurrences; not word-boundary aware."""
    if not keyword:
        return 0
    return len(re.findall(re.escape(keyword), corpus, flags=re.IGNORECASE))


def _contains(text: str, keyword: str) -> bool:
    return keyword.lower() in text.lower()


def _first_line(message: str) -> str:
    return message.split("\n", 1)[0]


def _changed_files(commits: Iterable[GitHubCommit]) -> List[str]:
    return [changed.filename for commit in commits for changed in (commit.files or [])]


def _activity_corpus(commits: Sequence[GitHubCommit], pull_requests: Sequence[GitHubPullRequest]) -> str:
    # Commit messages are weighted twice against pull request text.
    parts = [f"{commit.message} {commit.message}" for commit in commits]
    parts.extend(f"{pr.title} {pr.body or ''}" for pr in pull_requests)
    parts.extend(_changed_files(commits))
    return " ".join(parts)


def _percent(count: int, total: int) -> float:
    return round(count / total * 100, 2) if total > 0 else 0.0


def _score_categories(
    corpus: str,
    patterns: Mapping[str, Tuple[str, ...]],
    collect: Callable[[str], Iterable[str]],
) -> "OrderedDict[str, Tuple[int, List[str]]]":
    hits: "OrderedDict[str, Tuple[int, List[str]]]" = OrderedDict()
    for category, keywords in patterns.items():
        count = 0
        evidence: List[str] = []
        for keyword in keywords:
            count += count_occurrences(corpus, keyword)
            for item in collect(keyword):
                if item not in evidence:
                    evidence.append(item)
        if count > 0:
            hits[category] = (count, evidence)
    return hits


def analyze_languages(commits: Sequence[GitHubCommit]) -> List[LanguageUsage]:
    file_counts: Dict[str, int] = {}
    line_counts: Dict[str, int] = {}

    for commit in commits:
        if commit.files is not None:
            for changed in commit.files:
                language = detect_language(changed.filename)
                file_counts[language] = file_counts.get(language, 0) + 1
                line_counts[language] = line_counts.get(language, 0) + changed.additions
        else:
            for path in extract_file_paths(commit.message):
                language = detect_language(path)
                file_counts[language] = file_counts.get(language, 0) + 1
                if commit.stats is not None:
                    line_counts[language] = line_counts.get(language, 0) + commit.stats.additions

    total = sum(file_counts.values())
    usages = [
        LanguageUsage(
            language=language,
            file_count=count,
            lines_of_code=line_counts.get(language, 0),
            percentage=_percent(count, total),
        )
        for language, count in file_counts.items()
    ]
    return sorted(usages, key=lambda usage: -usage.file_count)


def analyze_technologies(
    commits: Sequence[GitHubCommit], pull_requests: Sequence[GitHubPullRequest]
) -> List[TechnologyUsage]:
    corpus = _activity_corpus(commits, pull_requests)
    file_names = _changed_files(commits)

    hits = _score_categories(
        corpus,
        TECHNOLOGY_PATTERNS,
        lambda keyword: [name for name in file_names if _contains(name, keyword)],
    )
    total = sum(count for count, _ in hits.values())
    usages = [
        TechnologyUsage(
            technology=technology,
            usage_count=count,
            percentage=_percent(count, total),
            files=files[:MAX_TECHNOLOGY_FILES],
        )
        for technology, (count, files) in hits.items()
    ]
    return sorted(usages, key=lambda usage: -usage.usage_count)


def _commit_examples(commits: Sequence[GitHubCommit], keyword: str) -> List[str]:
    return [_first_line(commit.message) for commit in commits if _contains(commit.message, keyword)]


def analyze_domain_areas(
    commits: Sequence[GitHubCommit], pull_requests: Sequence[GitHubPullRequest]
) -> List[DomainArea]:
    corpus = _activity_corpus(commits, pull_requests)

    def collect(keyword: str) -> List[str]:
        examples = _commit_examples(commits, keyword)
        examples.extend(pr.title for pr in pull_requests if _contains(pr.title, keyword))
        return examples

    hits = _score_categories(corpus, DOMAIN_PATTERNS, collect)
    total = sum(count for count, _ in hits.values())
    areas = [
        DomainArea(
            area=area,
            contribution_count=count,
            percentage=_percent(count, total),
            examples=examples[:MAX_EXAMPLES],
        )
        for area, (count, examples) in hits.items()
    ]
    return sorted(areas, key=lambda area: -area.contribution_count)


def analyze_concepts(commits: Sequence[GitHubCommit]) -> List[ConceptUsage]:
    corpus = " ".join(commit.message for commit in commits)
    hits = _score_categories(corpus, CONCEPT_PATTERNS, lambda keyword: _commit_examples(commits, keyword))
    total = sum(count for count, _ in hits.values())
    concepts = [
        ConceptUsage(
            concept=concept,
            occurrence_count=count,
            percentage=_percent(count, total),
            examples=examples[:MAX_EXAMPLES],
        )
        for concept, (count, examples) in hits.items()
    ]
    return sorted(concepts, key=lambda concept: -concept.occurrence_count)


def _display_name(commits: Sequence[GitHubCommit], username: str) -> str:
    if commits:
        details = commits[0].commit
        if details is not None and details.author is not None and details.author.name:
            return details.author.name
    return username


def analyze_developer(
    username: str,
    commits: Sequence[GitHubCommit],
    pull_requests: Sequence[GitHubPullRequest],
) -> DeveloperStrongAreas:
    """Summarize one developer's activity into languages, technologies, domains and concepts."""
    with_stats = [commit.stats for commit in commits if commit.stats is not None]
    return DeveloperStrongAreas(
        developer_username=username,
        developer_name=_display_name(commits, username),
        total_commits=len(commits),
        total_pull_requests=len(pull_requests),
        total_lines_added=sum(stats.additions for stats in with_stats),
        total_lines_deleted=sum(stats.deletions for stats in with_stats),
        languages=analyze_languages(commits),
        technologies=analyze_technologies(commits, pull_requests),
        domain_areas=analyze_domain_areas(commits, pull_requests),
        concepts=analyze_concepts(commits),
    )


__all__ = [
    "CONCEPT_PATTERNS",
    "DOMAIN_PATTERNS",
    "LANGUAGE_EXTENSIONS",
    "TECHNOLOGY_PATTERNS",
    "UNKNOWN_LANGUAGE",
    "analyze_concepts",
    "analyze_developer",
    "analyze_domain_areas",
    "analyze_languages",
    "analyze_technologies",
    "count_occurrences",
    "detect_language",
    "extract_file_paths",
]
