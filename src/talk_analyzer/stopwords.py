"""Stop word lists for English and Chinese text."""

EN_STOPWORDS = frozenset(
    {
        "a", "about", "above", "after", "again", "against", "all", "also", "am", "an",
        "and", "any", "are", "aren't", "as", "at", "be", "because", "been", "before",
        "being", "below", "between", "both", "but", "by", "can", "can't", "cannot",
        "could", "couldn't", "did", "didn't", "do", "does", "doesn't", "doing", "don't",
        "down", "during", "each", "else", "etc", "even", "ever", "every", "few", "for",
        "from", "further", "get", "gets", "got", "had", "hadn't", "has", "hasn't",
        "have", "haven't", "having", "he", "he'd", "he'll", "he's", "her", "here",
        "here's", "hers", "herself", "him", "himself", "his", "how", "how's", "however",
        "i", "i'd", "i'll", "i'm", "i've", "if", "in", "into", "is", "isn't", "it",
        "it's", "its", "itself", "just", "let", "let's", "like", "may", "me", "might",
        "more", "most", "much", "must", "mustn't", "my", "myself", "need", "no", "nor",
        "not", "now", "of", "off", "ok", "okay", "on", "once", "one", "only", "or",
        "other", "ought", "our", "ours", "ourselves", "out", "over", "own", "please",
        "same", "shall", "shan't", "she", "she'd", "she'll", "she's", "should",
        "shouldn't", "so", "some", "such", "than", "that", "that's", "the", "their",
        "theirs", "them", "themselves", "then", "there", "there's", "these", "they",
        "they'd", "they'll", "they're", "they've", "this", "those", "though", "through",
        "to", "too", "under", "until", "up", "upon", "us", "use", "used", "using",
        "very", "via", "want", "was", "wasn't", "we", "we'd", "we'll", "we're", "we've",
        "well", "were", "weren't", "what", "what's", "when", "when's", "where",
        "where's", "whether", "which", "while", "who", "who's", "whom", "why", "why's",
        "will", "with", "won't", "would", "wouldn't", "yes", "yet", "you", "you'd",
        "you'll", "you're", "you've", "your", "yours", "yourself", "yourselves",
    }
)

ZH_STOPWORDS = frozenset(
    {
        "的", "了", "是", "我", "你", "他", "她", "它", "我们", "你们", "他们", "她们",
        "它们", "这", "那", "这个", "那个", "这些", "那些", "在", "和", "与", "及", "或",
        "就", "也", "都", "而", "且", "但", "但是", "并", "很", "还", "又", "再", "把",
        "被", "让", "给", "对", "从", "向", "到", "为", "为了", "以", "用", "于", "之",
        "其", "着", "过", "吗", "呢", "吧", "啊", "呀", "哦", "嗯", "么", "什么", "怎么",
        "怎样", "如何", "为什么", "哪", "哪里", "哪个", "谁", "没", "没有", "不", "不是",
        "有", "要", "会", "能", "可以", "可能", "应该", "需要", "如果", "因为", "所以",
        "然后", "还是", "一个", "一些", "一下", "已经", "比较", "非常", "自己", "这样",
        "那样", "时候", "现在", "就是", "只是", "等", "等等",
    }
)
